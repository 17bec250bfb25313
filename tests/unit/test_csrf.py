import pytest

from kitchen_iam.api.utils.csrf import issue_csrf_token, verify_csrf_pair


def test_token_is_32_bytes_hex():
    token = issue_csrf_token()
    assert len(token) == 64
    int(token, 16)
    assert issue_csrf_token() != token


@pytest.mark.parametrize(
    "cookie, header, expected",
    [
        ("abc123", "abc123", True),
        ("abc123", "abc124", False),
        ("abc123", "ABC123", False),
        ("abc123", None, False),
        (None, "abc123", False),
        ("", "", False),
        (None, None, False),
    ],
)
def test_pair_must_be_present_and_equal(cookie, header, expected):
    assert verify_csrf_pair(cookie, header) is expected
