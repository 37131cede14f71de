from pydantic import BaseModel, ConfigDict, Field, field_validator

class CatalogEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    display_title: str = Field(alias="displayTitle")
    embedding_text: str = Field(alias="embeddingText")
    url: str = ""
    image_url: str = Field("", alias="imageUrl")
    product_type: str = Field("", alias="productType")
    discount: float = 0.0
    price: float
    variants: str = ""
    create_date: str = Field("", alias="createDate")

class ChatRequest(BaseModel):
    query: str = Field(min_length=1, examples=["I am looking for a phone"])

    @field_validator("query")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("query must not be blank")
        return v

class ChatResponse(BaseModel):
    reply: str

class ErrorResponse(BaseModel):
    error: str
    detail: str
