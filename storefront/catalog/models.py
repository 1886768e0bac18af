from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CatalogItem(BaseModel):
    """The slice of a product the related-products scorer looks at."""

    model_config = ConfigDict(frozen=True)

    id: str
    category: str
    subcategory: str = ""
    price: float
    is_summer: bool = False
    is_winter: bool = False
    is_ethnic: bool = False
    is_western: bool = False
    is_bestseller: bool = False
    is_new: bool = False


class Product(BaseModel):
    id: str
    name: str
    description: str
    price: float
    original_price: float
    category: str
    subcategory: str = ""
    image: str
    sizes: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    stock: int = 0
    rating: float = 0.0
    is_active: bool = True
    is_summer: bool = False
    is_winter: bool = False
    is_ethnic: bool = False
    is_western: bool = False
    is_bestseller: bool = False
    is_new: bool = False
    created_at: str

    def to_catalog_item(self) -> CatalogItem:
        return CatalogItem(
            id=self.id,
            category=self.category,
            subcategory=self.subcategory,
            price=self.price,
            is_summer=self.is_summer,
            is_winter=self.is_winter,
            is_ethnic=self.is_ethnic,
            is_western=self.is_western,
            is_bestseller=self.is_bestseller,
            is_new=self.is_new,
        )


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)
    original_price: float | None = Field(
        default=None, gt=0, description="Defaults to price when omitted"
    )
    category: str = Field(..., min_length=1)
    subcategory: str = ""
    image: str = Field(..., min_length=1)
    sizes: list[str] = Field(default_factory=list)
    colors: list[str] = Field(default_factory=list)
    stock: int = Field(default=0, ge=0)
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    is_summer: bool = False
    is_winter: bool = False
    is_ethnic: bool = False
    is_western: bool = False
    is_bestseller: bool = False
    is_new: bool = False


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    price: float | None = Field(default=None, gt=0)
    original_price: float | None = Field(default=None, gt=0)
    category: str | None = Field(default=None, min_length=1)
    subcategory: str | None = None
    image: str | None = None
    sizes: list[str] | None = None
    colors: list[str] | None = None
    stock: int | None = Field(default=None, ge=0)
    rating: float | None = Field(default=None, ge=0.0, le=5.0)
    is_active: bool | None = None
    is_summer: bool | None = None
    is_winter: bool | None = None
    is_ethnic: bool | None = None
    is_western: bool | None = None
    is_bestseller: bool | None = None
    is_new: bool | None = None


class ProductListResponse(BaseModel):
    products: list[Product]
    total: int
