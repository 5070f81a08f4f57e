from django.urls import path
from . import views

app_name = 'activities'

urlpatterns = [
    path('', views.ActivityListView.as_view(), name='activity_list'),
    path('new/', views.ActivityCreateView.as_view(), name='activity_create'),
    path('<int:pk>/edit/', views.ActivityUpdateView.as_view(), name='activity_edit'),
    path('<int:pk>/status/', views.ActivityStatusView.as_view(), name='activity_status'),
    path('<int:pk>/delete/', views.ActivityDeleteView.as_view(), name='activity_delete'),
    path('bulk-action/', views.ActivityBulkActionView.as_view(), name='activity_bulk_action'),

    # JSON export / import
    path('export/', views.ActivityExportView.as_view(), name='activity_export'),
    path('import/', views.ActivityImportView.as_view(), name='activity_import'),
]
