"""
Serialization of the resize response in the supported return formats.
"""
import json
import xml.etree.ElementTree as ET
from typing import Any, Dict

import yaml

from ..services.models import DEFAULT_RETURN_FORMAT, ResizeResponse


def _response_dict(response: ResizeResponse) -> Dict[str, Any]:
    return response.model_dump(by_alias=True, mode='json')


def to_json(response: ResizeResponse) -> str:
    return json.dumps(_response_dict(response))


def to_yaml(response: ResizeResponse) -> str:
    return yaml.safe_dump(_response_dict(response), sort_keys=False, default_flow_style=False)


def to_xml(response: ResizeResponse) -> str:
    """Render the response as ``<ResizeResponse>`` with one ``<ResizeResult>`` per item."""
    data = _response_dict(response)
    root = ET.Element("ResizeResponse")

    results = ET.SubElement(root, "Results")
    for result in data["Results"]:
        item = ET.SubElement(results, "ResizeResult")
        for key, value in result.items():
            child = ET.SubElement(item, key)
            if value is not None:
                child.text = str(value)

    ET.SubElement(root, "Summary").text = data["Summary"]
    return ET.tostring(root, encoding="unicode")


FORMATTERS = {
    'json': to_json,
    'xml': to_xml,
    'yaml': to_yaml,
}


def serialize(response: ResizeResponse, return_format: str = DEFAULT_RETURN_FORMAT) -> str:
    """Serialize a response; unknown formats fall back to JSON."""
    formatter = FORMATTERS.get((return_format or DEFAULT_RETURN_FORMAT).lower(), to_json)
    return formatter(response)
