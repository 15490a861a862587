from rest_framework.decorators import api_view, permission_classes

from records.permissions import gate, gate_methods
from records.responses import created, listing, ok
from records.serializers.base import validated
from records.serializers.staff import StaffSerializer
from records.services import staff as svc


@api_view(['GET', 'POST'])
@permission_classes([gate_methods(GET='staff.list', POST='staff.create')])
def staff_collection(request):
    if request.method == 'POST':
        data = validated(StaffSerializer(data=request.data))
        return created(svc.create_staff(request.user, data), message='Staff member created')
    return listing(svc.list_staff())


@api_view(['GET'])
@permission_classes([gate('staff.search')])
def search_staff(request, term: str):
    """Match on name, specialty name or license number."""
    return listing(svc.search_staff(term))


@api_view(['GET'])
@permission_classes([gate('staff.stats')])
def staff_stats(request):
    return ok(svc.staff_stats())


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([gate_methods(GET='staff.get', PUT='staff.update',
                                  PATCH='staff.update', DELETE='staff.delete')])
def staff_detail(request, staff_id: int):
    if request.method == 'GET':
        return ok(svc.get_staff(request.user, staff_id))
    if request.method == 'DELETE':
        name = svc.delete_staff(request.user, staff_id)
        return ok(message=f'Staff member {name} deleted')
    patch = validated(StaffSerializer(data=request.data, partial=True))
    return ok(svc.update_staff(request.user, staff_id, patch), message='Staff member updated')


@api_view(['GET'])
@permission_classes([gate('specialties.list')])
def list_specialties(request):
    return listing(svc.list_specialties())
