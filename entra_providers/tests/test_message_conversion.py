from __future__ import annotations

import pytest
from pydantic import ValidationError

from entra_providers.azure_entra.message_conversion import (
    convert_message_content,
    convert_to_openai_messages,
)
from entra_providers.base.dto import Base64ImageSource, ImageBlock, MessageParam, TextBlock
from entra_providers.base.errors import ErrorCode, UnsupportedContentError

PNG_DATA = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="


def _image(data: str = PNG_DATA, media_type: str = "image/png") -> dict:
    return {"type": "image", "source": {"type": "base64", "media_type": media_type, "data": data}}


def test_single_text_block_collapses_to_string():
    assert convert_message_content([{"type": "text", "text": "Hello"}]) == "Hello"  # nosec B101
    assert convert_message_content([TextBlock(text="typed")]) == "typed"  # nosec B101


def test_mixed_blocks_keep_order():
    content = [
        {"type": "text", "text": "Look:"},
        _image(),
        {"type": "text", "text": "and this"},
    ]
    assert convert_message_content(content) == [  # nosec B101
        {"type": "text", "text": "Look:"},
        {"type": "image_url", "image_url": {"url": f"data:image/png;base64,{PNG_DATA}"}},
        {"type": "text", "text": "and this"},
    ]


def test_single_image_is_a_list():
    block = ImageBlock(source=Base64ImageSource(media_type="image/jpeg", data="abc+/="))
    assert convert_message_content([block]) == [  # nosec B101
        {"type": "image_url", "image_url": {"url": "data:image/jpeg;base64,abc+/="}}
    ]


def test_two_text_blocks_are_not_collapsed():
    parts = convert_message_content([{"type": "text", "text": "a"}, {"type": "text", "text": "b"}])
    assert parts == [{"type": "text", "text": "a"}, {"type": "text", "text": "b"}]  # nosec B101


def test_empty_content_is_empty_list():
    assert convert_message_content([]) == []  # nosec B101


def test_url_image_is_rejected():
    content = [{"type": "image", "source": {"type": "url", "url": "https://img.invalid/a.png"}}]
    with pytest.raises(UnsupportedContentError) as excinfo:
        convert_message_content(content)
    err = excinfo.value
    assert err.code is ErrorCode.UNSUPPORTED  # nosec B101
    assert err.block_type == "image"  # nosec B101
    assert err.source_type == "url"  # nosec B101
    assert "base64" in err.message  # nosec B101


def test_unknown_block_type_is_a_validation_error():
    with pytest.raises(ValidationError):
        convert_message_content([{"type": "audio", "data": "..."}])


def test_system_prompt_prepended_and_roles_preserved():
    messages = [
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": [{"type": "text", "text": "Hello!"}]},
        {"role": "user", "content": [{"type": "text", "text": "See"}, _image()]},
    ]
    out = convert_to_openai_messages("Be concise.", messages)
    assert [m["role"] for m in out] == ["system", "user", "assistant", "user"]  # nosec B101
    assert out[0] == {"role": "system", "content": "Be concise."}  # nosec B101
    assert out[1]["content"] == "Hi"  # nosec B101
    assert out[2]["content"] == "Hello!"  # nosec B101
    assert isinstance(out[3]["content"], list)  # nosec B101


def test_empty_system_prompt_is_omitted():
    out = convert_to_openai_messages("", [MessageParam(role="user", content="Hi")])
    assert out == [{"role": "user", "content": "Hi"}]  # nosec B101


def test_no_messages_dropped():
    messages = [{"role": "user", "content": str(i)} for i in range(5)]
    out = convert_to_openai_messages("sys", messages)
    assert len(out) == 6  # nosec B101
    assert [m["content"] for m in out[1:]] == ["0", "1", "2", "3", "4"]  # nosec B101


def test_extra_block_keys_are_ignored():
    content = [{"type": "text", "text": "cached", "cache_control": {"type": "ephemeral"}}]
    assert convert_message_content(content) == "cached"  # nosec B101
