"""Product model for catalog documents."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

# Properties Cosmos DB adds to every stored document
SYSTEM_PROPERTIES = ("id", "_rid", "_self", "_etag", "_attachments", "_ts")


@dataclass(frozen=True)
class CompatibleRef:
    """Edge descriptor embedded in a product.

    The referenced code is not required to exist in the catalog.
    """

    type: str  # Nature of the relation, e.g. "Conector a superficie plana"
    code: str  # Referenced product code, e.g. "YA25"

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "CompatibleRef":
        return cls(type=document["type"], code=document["code"])


@dataclass
class Product:
    """Catalog entry identified by a unique, case-sensitive code."""

    code: str
    name: str
    brand: Optional[str] = None
    provider: Optional[str] = None
    group: Optional[str] = None
    line: Optional[str] = None
    image: Optional[str] = None
    type: Optional[str] = None  # Category label
    datasheet: Optional[str] = None
    price: float = 0
    stock: int = 0
    compatibles: List[CompatibleRef] = field(default_factory=list)

    @property
    def compatible_codes(self) -> List[str]:
        """Codes declared in compatibles, in insertion order."""
        return [ref.code for ref in self.compatibles]

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Product":
        """Build a product from a stored document, ignoring system properties."""
        data = {k: v for k, v in document.items() if k not in SYSTEM_PROPERTIES}
        compatibles = [
            CompatibleRef.from_document(ref) for ref in data.pop("compatibles", None) or []
        ]
        known = {name for name in cls.__dataclass_fields__ if name != "compatibles"}
        fields = {k: v for k, v in data.items() if k in known}
        if fields.get("price") is None:
            fields["price"] = 0
        if fields.get("stock") is None:
            fields["stock"] = 0
        return cls(compatibles=compatibles, **fields)

    def to_document(self) -> Dict[str, Any]:
        """Serialize to a Cosmos DB document keyed by code."""
        document = asdict(self)
        document["id"] = self.code
        return document
