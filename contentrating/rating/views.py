from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_http_methods

from content.forms import NodeForm
from content.models import Node, NodeType
from .config import RatingConfig
from .forms import RatingTypeSettingForm
from .store import rating_store


def form_errors(form):
    return {field: [e['message'] for e in errors] for field, errors in form.errors.get_json_data().items()}


# ------------------ TYPE SETTING ------------------
@require_http_methods(["GET", "POST"])
def type_setting(request, node_type):
    node_type = get_object_or_404(NodeType, type=node_type)
    config = RatingConfig.load()

    if request.method == "POST":
        if not request.user.is_staff:
            return JsonResponse({'status': 'error', 'message': 'Unauthorized'}, status=403)

        form = RatingTypeSettingForm(request.POST)
        if not form.is_valid():
            return JsonResponse({'status': 'error', 'errors': form_errors(form)}, status=400)
        config.set(node_type.type, form.cleaned_data['enabled'])

    return JsonResponse({'type': node_type.type, 'enabled': config.is_participating(node_type.type)})


# ------------------ NODE RATING ------------------
@require_http_methods(["GET", "POST"])
def node_rating(request, nid):
    node = get_object_or_404(Node.objects.select_related('type'), nid=nid)

    if request.method == "POST":
        if not request.user.is_authenticated:
            return JsonResponse({'status': 'error', 'message': 'Unauthorized'}, status=403)

        # Rating a node must not write a revision when its type is not rated
        if not RatingConfig.load().is_participating(node.type.type):
            return JsonResponse(
                {'status': 'error', 'message': f"Content of type {node.type.name} cannot be rated."},
                status=409,
            )

        item = Node.objects.load([nid])[0]
        data = {'title': item.title, 'body': item.body}
        if 'rating' in request.POST:
            data['rating'] = request.POST['rating']
        if request.POST.get('revision', '1').lower() not in ('0', 'false', 'no', ''):
            data['revision'] = 'on'

        form = NodeForm(data, node_type=node.type, node=node, item=item)
        if not form.is_valid():
            return JsonResponse({'status': 'error', 'errors': form_errors(form)}, status=400)
        form.save()

    item = Node.objects.load([nid])[0]
    renderable = rating_store.render(item, RatingConfig.load())
    return JsonResponse({
        'nid': item.nid,
        'vid': item.vid,
        'type': item.type,
        'rating': renderable.rating if renderable else None,
        'label': renderable.label if renderable else None,
    })
