import pytest

from wsgiauth.result import Result

def test_codes():
    assert Result.SUCCESS == 1
    assert Result.FAILURE == 0
    assert Result.FAILURE_IDENTITY_NOT_FOUND == -1
    assert Result.FAILURE_IDENTITY_AMBIGUOUS == -2
    assert Result.FAILURE_CREDENTIAL_INVALID == -3
    assert Result.FAILURE_UNCATEGORIZED == -4

def test_valid():
    result = Result(Result.SUCCESS, 'bing', ['welcome'])
    assert result.is_valid()
    assert result
    assert result.identity == 'bing'
    assert result.messages == ['welcome']
    for code in (Result.FAILURE, Result.FAILURE_IDENTITY_NOT_FOUND,
                 Result.FAILURE_IDENTITY_AMBIGUOUS,
                 Result.FAILURE_CREDENTIAL_INVALID,
                 Result.FAILURE_UNCATEGORIZED):
        assert not Result(code, None).is_valid()
        assert not Result(code, None)

def test_immutable():
    result = Result(Result.SUCCESS, 'bing')
    assert result.messages == []
    result.messages.append('ignored')
    assert result.messages == []
    with pytest.raises(AttributeError):
        result.code = Result.FAILURE
    with pytest.raises(AttributeError):
        result.identity = 'bong'
    assert 'bing' in repr(result)
