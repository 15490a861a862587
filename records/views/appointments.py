from rest_framework.decorators import api_view, permission_classes

from records.permissions import gate, gate_methods
from records.responses import created, listing, ok
from records.serializers.appointments import AppointmentSerializer
from records.serializers.base import validated
from records.services import appointments as svc


@api_view(['GET', 'POST'])
@permission_classes([gate_methods(GET='appointments.list', POST='appointments.create')])
def appointments_collection(request):
    if request.method == 'POST':
        data = validated(AppointmentSerializer(data=request.data))
        return created(svc.create_appointment(request.user, data), message='Appointment scheduled')
    return listing(svc.list_appointments())


@api_view(['GET'])
@permission_classes([gate('appointments.by_patient')])
def appointments_by_patient(request, patient_id: int):
    return listing(svc.appointments_for_patient(request.user, patient_id))


@api_view(['GET'])
@permission_classes([gate('appointments.by_staff')])
def appointments_by_staff(request, staff_id: int):
    return listing(svc.appointments_for_staff(request.user, staff_id))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([gate_methods(GET='appointments.get', PUT='appointments.update',
                                  PATCH='appointments.update', DELETE='appointments.delete')])
def appointment_detail(request, appointment_id: int):
    if request.method == 'GET':
        return ok(svc.get_appointment(request.user, appointment_id))
    if request.method == 'DELETE':
        svc.delete_appointment(request.user, appointment_id)
        return ok(message='Appointment deleted')
    patch = validated(AppointmentSerializer(data=request.data, partial=True))
    return ok(svc.update_appointment(request.user, appointment_id, patch), message='Appointment updated')
