"""Content negotiation 與 JSON / XML 輸出

路由只處理一次邏輯，再依照協商出的 media type 決定輸出格式。
"""

import logging
import xml.etree.ElementTree as ET
from enum import StrEnum
from typing import Any, NamedTuple
from uuid import UUID

import msgspec
from fastapi import Header, HTTPException, Response

logger = logging.getLogger(__name__)


class MediaType(StrEnum):
    json = "application/json"
    xml = "application/xml"


JSON_PATCH_MEDIA_TYPE = "application/json-patch+json"

_ALIASES: dict[str, MediaType] = {
    "application/json": MediaType.json,
    "text/json": MediaType.json,
    "application/xml": MediaType.xml,
    "text/xml": MediaType.xml,
}
# 萬用字元時以 JSON 為預設
_WILDCARDS = {"*/*", "application/*"}


class AcceptEntry(NamedTuple):
    media_range: str
    quality: float
    position: int


def parse_accept(accept: str) -> list[AcceptEntry]:
    """解析 Accept header，依 q 值由高到低排序，q 相同時保持原順序"""
    entries: list[AcceptEntry] = []
    for position, part in enumerate(accept.split(",")):
        media_range, *params = [p.strip() for p in part.split(";")]
        if not media_range:
            continue
        quality = 1.0
        for param in params:
            key, _, value = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        entries.append(AcceptEntry(media_range.lower(), quality, position))
    entries.sort(key=lambda e: (-e.quality, e.position))
    return entries


def negotiate_media_type(accept: str | None) -> MediaType | None:
    """回傳要使用的 media type；沒有可接受的類型時回傳 None"""
    if accept is None or not accept.strip():
        return MediaType.json
    for entry in parse_accept(accept):
        if entry.quality <= 0:
            continue
        if entry.media_range in _ALIASES:
            return _ALIASES[entry.media_range]
        if entry.media_range in _WILDCARDS:
            return MediaType.json
    return None


def negotiated_media_type(accept: str | None = Header(None)) -> MediaType:
    """FastAPI dependency：協商失敗時回應 406"""
    media_type = negotiate_media_type(accept)
    if media_type is None:
        logger.info("No acceptable media type in Accept: %s", accept)
        raise HTTPException(
            status_code=406,
            detail=f"Supported media types: {', '.join(MediaType)}",
        )
    return media_type


def _element_name(key: str) -> str:
    return key[:1].upper() + key[1:]


def _root_name(content: Any) -> str:
    if isinstance(content, msgspec.Struct):
        return type(content).__name__
    if isinstance(content, list):
        inner = _root_name(content[0]) if content else "anyType"
        return f"ArrayOf{inner}"
    if isinstance(content, UUID):
        return "guid"
    if isinstance(content, bool):
        return "boolean"
    if isinstance(content, int):
        return "int"
    return "string"


def _fill(elem: ET.Element, value: Any) -> None:
    if value is None:
        elem.set("nil", "true")
    elif isinstance(value, dict):
        for k, v in value.items():
            _fill(ET.SubElement(elem, _element_name(k)), v)
    elif isinstance(value, list):
        for v in value:
            _fill(ET.SubElement(elem, "Item"), v)
    elif isinstance(value, bool):
        elem.text = "true" if value else "false"
    else:
        elem.text = str(value)


def encode_xml(content: Any, root: str | None = None) -> bytes:
    """將 msgspec Struct、list 或純量編碼為 XML

    Struct 以型別名稱作為根元素，欄位名稱轉為 PascalCase；
    list 以 `ArrayOf{型別}` 包住每個元素。
    """
    root_elem = ET.Element(root or _root_name(content))
    if isinstance(content, list):
        for item in content:
            _fill(ET.SubElement(root_elem, _root_name(item)), msgspec.to_builtins(item))
    else:
        _fill(root_elem, msgspec.to_builtins(content))
    return ET.tostring(root_elem, encoding="utf-8")


class NegotiatedResponse(Response):
    """依照 media_type 以 msgspec JSON 或 XML 輸出內容"""

    media_type = MediaType.json

    def __init__(self, content: Any, *args, xml_root: str | None = None, **kwargs):
        self.xml_root = xml_root
        super().__init__(content, *args, **kwargs)

    def render(self, content: Any) -> bytes:
        if self.media_type == MediaType.xml:
            return encode_xml(content, self.xml_root)
        return msgspec.json.encode(content)
