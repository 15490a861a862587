"""Records application for the hospital administration backend.

Holds the account, patient, staff, appointment and clinical note models
together with the role gate, ownership scoping and the services and
views behind the ``/api/`` routes.
"""
