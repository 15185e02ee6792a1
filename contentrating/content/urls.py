from django.urls import path
from .views import node_list, node_detail, node_add, node_edit, node_delete, node_type_edit

urlpatterns = [
    path('', node_list, name='node_list'),
    path('node/add/<slug:node_type>/', node_add, name='node_add'),
    path('node/<int:nid>/', node_detail, name='node_detail'),
    path('node/<int:nid>/edit/', node_edit, name='node_edit'),
    path('node/<int:nid>/delete/', node_delete, name='node_delete'),
    path('types/<slug:node_type>/', node_type_edit, name='node_type_edit'),
]
