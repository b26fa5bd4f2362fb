"""Domain errors raised outside the compatibility engine.

The engine itself never raises for any build; these cover catalog loading,
build mutations and share-link decoding.
"""

from __future__ import annotations


class PCForgeError(Exception):
    code = "PCFORGE_ERROR"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}


class CatalogError(PCForgeError):
    code = "CATALOG_ERROR"
    http_status = 500


class UnknownCategoryError(PCForgeError):
    code = "UNKNOWN_CATEGORY"
    http_status = 404

    def __init__(self, category: str):
        super().__init__(f"unknown category: {category}")
        self.category = category


class UnknownPartError(PCForgeError):
    code = "UNKNOWN_PART"
    http_status = 404

    def __init__(self, category: str, part_id: str):
        super().__init__(f"no {category} part with id {part_id!r}")
        self.category = category
        self.part_id = part_id


class IncompatiblePartError(PCForgeError):
    code = "INCOMPATIBLE_PART"
    http_status = 409

    def __init__(self, category: str, part_id: str, reasons: list[str]):
        detail = "; ".join(reasons)
        super().__init__(f"{category} part {part_id!r} is incompatible with the build: {detail}")
        self.category = category
        self.part_id = part_id
        self.reasons = reasons


class ShareLinkError(PCForgeError):
    code = "INVALID_SHARE_LINK"
    http_status = 400
