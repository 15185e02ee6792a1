from django.contrib import messages
from django.contrib.admin.views.decorators import staff_member_required
from django.contrib.auth.decorators import login_required
from django.http import Http404
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from .forms import NodeForm, NodeTypeForm
from .models import Node, NodeType
from .signals import node_viewing


def load_item_or_404(nid):
    items = Node.objects.load([nid])
    if not items:
        raise Http404("No node matches the given query.")
    return items[0]


# ------------------ LIST NODES ------------------
def node_list(request):
    nodes = Node.objects.select_related('type').order_by('-updated_at')
    return render(request, 'content/node_list.html', {
        'nodes': nodes,
        'node_types': NodeType.objects.all(),
    })


# ------------------ VIEW NODE ------------------
def node_detail(request, nid):
    item = load_item_or_404(nid)
    context = {'item': item, 'content': {}}

    # Extensions add rendered pieces to context["content"]
    node_viewing.send(sender=Node, item=item, context=context)

    return render(request, 'content/node_detail.html', context)


# ------------------ CREATE / EDIT NODE ------------------
@login_required
def node_add(request, node_type):
    node_type = get_object_or_404(NodeType, type=node_type)

    if request.method == 'POST':
        form = NodeForm(request.POST, node_type=node_type)
        if form.is_valid():
            node, item = form.save()
            messages.success(request, f"{node_type.name} {node.title} has been created.")
            return redirect('node_detail', nid=node.nid)
    else:
        form = NodeForm(node_type=node_type)

    return render(request, 'content/node_form.html', {'form': form, 'node_type': node_type})


@login_required
def node_edit(request, nid):
    node = get_object_or_404(Node.objects.select_related('type'), nid=nid)
    item = load_item_or_404(nid)

    if request.method == 'POST':
        form = NodeForm(request.POST, node_type=node.type, node=node, item=item)
        if form.is_valid():
            form.save()
            messages.success(request, f"{node.type.name} {node.title} has been updated.")
            return redirect('node_detail', nid=node.nid)
    else:
        form = NodeForm(node_type=node.type, node=node, item=item)

    return render(request, 'content/node_form.html', {'form': form, 'node_type': node.type, 'node': node})


# ------------------ DELETE NODE ------------------
@login_required
@require_POST
def node_delete(request, nid):
    node = get_object_or_404(Node, nid=nid)
    title = node.title
    node.delete()
    messages.success(request, f"{title} has been deleted.")
    return redirect('node_list')


# ------------------ NODE TYPE SETTINGS ------------------
@staff_member_required
def node_type_edit(request, node_type):
    node_type = get_object_or_404(NodeType, type=node_type)

    if request.method == 'POST':
        form = NodeTypeForm(request.POST, instance=node_type)
        if form.is_valid():
            form.save()
            messages.success(request, f"The content type {node_type.name} has been updated.")
            return redirect('node_list')
    else:
        form = NodeTypeForm(instance=node_type)

    return render(request, 'content/node_type_form.html', {'form': form, 'node_type': node_type})
