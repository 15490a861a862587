from rest_framework.decorators import api_view, permission_classes

from records.permissions import gate, gate_methods
from records.responses import created, listing, ok
from records.serializers.base import validated
from records.serializers.clinical_notes import ClinicalNoteSerializer
from records.services import clinical_notes as svc


@api_view(['GET', 'POST'])
@permission_classes([gate_methods(GET='notes.list', POST='notes.create')])
def notes_collection(request):
    if request.method == 'POST':
        data = validated(ClinicalNoteSerializer(data=request.data))
        return created(svc.create_note(request.user, data), message='Clinical note recorded')
    return listing(svc.list_notes())


@api_view(['GET'])
@permission_classes([gate('notes.today')])
def notes_today(request):
    """Notes whose creation date is today in the server time zone."""
    return listing(svc.notes_created_today())


@api_view(['GET'])
@permission_classes([gate('notes.by_patient')])
def notes_by_patient(request, patient_id: int):
    return listing(svc.notes_for_patient(request.user, patient_id))


@api_view(['GET'])
@permission_classes([gate('notes.by_staff')])
def notes_by_staff(request, staff_id: int):
    return listing(svc.notes_for_staff(request.user, staff_id))


@api_view(['GET'])
@permission_classes([gate('notes.by_appointment')])
def note_by_appointment(request, appointment_id: int):
    return ok(svc.note_for_appointment(appointment_id))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([gate_methods(GET='notes.get', PUT='notes.update',
                                  PATCH='notes.update', DELETE='notes.delete')])
def note_detail(request, note_id: int):
    if request.method == 'GET':
        return ok(svc.get_note(request.user, note_id))
    if request.method == 'DELETE':
        svc.delete_note(request.user, note_id)
        return ok(message='Clinical note deleted')
    patch = validated(ClinicalNoteSerializer(data=request.data, partial=True))
    return ok(svc.update_note(request.user, note_id, patch), message='Clinical note updated')
