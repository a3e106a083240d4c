from typing import List, Optional
from bookinfo.domain.models.product import Product

# The page only ever shows product 0
DEFAULT_PRODUCT_ID = 0

PRODUCTS: List[Product] = [
    Product(
        id=0,
        title="The Comedy of Errors",
        descriptionHtml=(
            '<a href="https://en.wikipedia.org/wiki/The_Comedy_of_Errors">Wikipedia Summary</a>: '
            "The Comedy of Errors is one of <b>William Shakespeare's</b> early plays. It is his shortest "
            "and one of his most farcical comedies, with a major part of the humour coming from slapstick "
            "and mistaken identity, in addition to puns and word play."
        ),
    ),
]

def get_products() -> List[Product]:
    return list(PRODUCTS)

def get_product(product_id: int) -> Optional[Product]:
    return next((p for p in PRODUCTS if p.id == product_id), None)
