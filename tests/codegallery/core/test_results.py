import pytest
from fastapi import HTTPException

from codegallery.core.results import fail, ok, unwrap, validate_input
from codegallery.schemas.common import PublicIdInput


def test_validate_input_accepts_camel_case_keys() -> None:
    result = validate_input(PublicIdInput, {'publicId': 'abcDEF123_-x'})

    assert result.success is True
    assert result.response.public_id == 'abcDEF123_-x'


def test_validate_input_passes_model_instances_through() -> None:
    data = PublicIdInput(public_id='abcDEF123_-x')

    assert validate_input(PublicIdInput, data).response is data


@pytest.mark.parametrize('public_id', ['short', 'abcDEF123_-xy', 'abc DEF123_x', 'abc$EF123_-x'])
def test_validate_input_rejects_bad_public_ids(public_id: str) -> None:
    result = validate_input(PublicIdInput, {'publicId': public_id})

    assert result.success is False
    assert result.code == 400
    assert result.error.startswith('Invalid input: ')


def test_unwrap_returns_response_on_success() -> None:
    assert unwrap(ok({'a': 1})) == {'a': 1}


def test_unwrap_raises_http_exception_with_result_code() -> None:
    with pytest.raises(HTTPException) as exception_info:
        unwrap(fail('Already liked this project', 409))

    assert exception_info.value.status_code == 409
    assert exception_info.value.detail == 'Already liked this project'
