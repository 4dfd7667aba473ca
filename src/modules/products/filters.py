import django_filters

from modules.core.identity import get_identity
from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    """Catalog filters.

    ``mine=true`` keeps the caller's own listings, ``mine=false`` keeps
    everybody else's (the storefront).
    """

    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    in_stock = django_filters.BooleanFilter(method="filter_in_stock")
    owner = django_filters.CharFilter(field_name="owner_id")
    mine = django_filters.BooleanFilter(method="filter_mine")

    class Meta:
        model = Product
        fields = ["name", "min_price", "max_price", "in_stock", "owner", "mine"]

    def filter_in_stock(self, queryset, name, value):
        if value is None:
            return queryset
        return queryset.filter(stock__gt=0) if value else queryset.filter(stock=0)

    def filter_mine(self, queryset, name, value):
        user_id = get_identity(getattr(self.request, "user", None))
        if value is None or not user_id:
            return queryset
        if value:
            return queryset.filter(owner_id=user_id)
        return queryset.exclude(owner_id=user_id)
