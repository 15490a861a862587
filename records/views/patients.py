from rest_framework.decorators import api_view, permission_classes

from records.permissions import gate, gate_methods
from records.responses import created, listing, ok
from records.serializers.base import validated
from records.serializers.patients import PatientSerializer
from records.services import patients as svc


@api_view(['GET', 'POST'])
@permission_classes([gate_methods(GET='patients.list', POST='patients.create')])
def patients_collection(request):
    if request.method == 'POST':
        data = validated(PatientSerializer(data=request.data))
        return created(svc.create_patient(request.user, data), message='Patient created')
    return listing(svc.list_patients())


@api_view(['GET'])
@permission_classes([gate('patients.search')])
def search_patients(request, term: str):
    return listing(svc.search_patients(term))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([gate_methods(GET='patients.get', PUT='patients.update',
                                  PATCH='patients.update', DELETE='patients.delete')])
def patient_detail(request, patient_id: int):
    if request.method == 'GET':
        return ok(svc.get_patient(request.user, patient_id))
    if request.method == 'DELETE':
        name = svc.delete_patient(request.user, patient_id)
        return ok(message=f'Patient {name} deleted')
    # PUT and PATCH both apply only the supplied keys
    patch = validated(PatientSerializer(data=request.data, partial=True))
    return ok(svc.update_patient(request.user, patient_id, patch), message='Patient updated')
