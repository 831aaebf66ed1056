"""Decoding of base64 workflow manifests into YAML documents."""

import base64
import binascii
import logging
from collections.abc import Mapping
from typing import Any

import yaml

from workflow_dispatcher.errors import ManifestDecodeError

log = logging.getLogger(__name__)


def decode_manifest(raw_content: str) -> Mapping[Any, Any]:
    """Decode base64 manifest content into a YAML mapping tree.

    Args:
        raw_content: Base64 encoded file content as returned by the content
            API (line breaks inside the blob are ignored)

    Returns:
        The parsed document; empty when the content is empty or the document
        is not a mapping

    Raises:
        ManifestDecodeError: If the content is not valid base64, UTF-8 or YAML

    """
    if not raw_content:
        return {}

    try:
        text = base64.b64decode(raw_content).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise ManifestDecodeError(f"Invalid manifest encoding: {e}") from e

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ManifestDecodeError(f"Invalid manifest YAML: {e}") from e

    if not isinstance(document, Mapping):
        log.info("Manifest is not a mapping (got %s)", type(document).__name__)
        return {}

    return document
