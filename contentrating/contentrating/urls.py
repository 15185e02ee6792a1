from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('rating/', include('rating.urls')),
    path('', include('content.urls')),
]
