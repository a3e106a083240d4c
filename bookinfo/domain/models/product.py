from pydantic import BaseModel, Field
from typing import Optional, Any, Dict

class Product(BaseModel):
    id: int
    title: str
    descriptionHtml: str

    model_config = {"frozen": True}  # immuable = safe

class DetailsRecord(BaseModel):
    """
    Book details as served by /details/{id}.
    Wire names follow the historical JSON shape (year, type, pages, ISBN-10, ISBN-13).
    """
    id: int
    author: str
    year: int                   # publication year
    type: str                   # binding type
    pages: int                  # page count
    publisher: str
    language: str
    isbn10: str = Field(alias="ISBN-10")
    isbn13: str = Field(alias="ISBN-13")

    model_config = {"frozen": True, "populate_by_name": True}

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

class ProductPageView(BaseModel):
    """
    Merged view handed to the product page template.
    A None payload means the matching section is degraded; its status says why.
    """
    product: Product
    details_status: int
    details: Optional[Dict[str, Any]] = None
    reviews_status: int
    reviews: Optional[Dict[str, Any]] = None

    @property
    def degraded(self) -> bool:
        return self.details is None or self.reviews is None
