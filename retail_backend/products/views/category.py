# products/views/category.py

from rest_framework import viewsets

from products.models import Category
from products.serializers import CategorySerializer


class CategoryViewSet(viewsets.ReadOnlyModelViewSet):
    """Categories are created by intake (upsert by name); listing only."""

    queryset = Category.objects.all().order_by("name")
    serializer_class = CategorySerializer
