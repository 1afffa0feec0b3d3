from urllib.parse import quote

from giftregistry.core.errors import ValidationError
from giftregistry.schemas.link import LinkSuggestion


MARKETPLACES = [
    ("Ozon", "https://www.ozon.ru/search/?text={query}"),
    ("Wildberries", "https://www.wildberries.ru/catalog/0/search.aspx?search={query}"),
    ("Yandex Market", "https://market.yandex.ru/search?text={query}"),
    ("Citilink", "https://www.citilink.ru/search/?text={query}"),
    ("DNS", "https://www.dns-shop.ru/search/?q={query}"),
]
MAX_QUERY_LENGTH = 100


class ProductSearchService:
    """Builds marketplace search links for an item title."""

    def suggest_links(self, product_name: str) -> list[LinkSuggestion]:
        product_name = product_name.strip()
        if not product_name:
            raise ValidationError("Item title is required")
        if len(product_name) > MAX_QUERY_LENGTH:
            raise ValidationError(f"Item title must not exceed {MAX_QUERY_LENGTH} characters")

        query = quote(product_name, safe="")
        return [
            LinkSuggestion(
                url=template.format(query=query),
                title=f"Find '{product_name}' on {source}",
                is_from_ai=True,
            )
            for source, template in MARKETPLACES
        ]
