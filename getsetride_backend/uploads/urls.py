from django.urls import path

from .views import ImageDeleteView, MultipleImageUploadView, SingleImageUploadView

urlpatterns = [
    path('upload/single', SingleImageUploadView.as_view(), name='upload-single'),
    path('upload/multiple', MultipleImageUploadView.as_view(), name='upload-multiple'),
    path('upload/<path:public_id>', ImageDeleteView.as_view(), name='upload-delete'),
]
