from django.urls import path
from .views import type_setting, node_rating

urlpatterns = [
    path('types/<slug:node_type>/', type_setting, name='rating_type_setting'),
    path('nodes/<int:nid>/', node_rating, name='rating_node'),
]
