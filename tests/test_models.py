import pytest
from pydantic import ValidationError

from fakes import make_feature
from mapfeed.core.errors import BadStatusError, TransportError
from mapfeed.models.dto import Feature, PagingCursor, PointGeometry, SourceResponse


def test_feature_is_immutable():
    feature = make_feature(1)
    with pytest.raises(ValidationError):
        feature.id = "other"


def test_point_rejects_three_dimensions():
    with pytest.raises(ValidationError):
        Feature.model_validate(
            {"id": "a", "type": "Feature", "geometry": {"type": "Point", "coordinates": [1, 2, 3]}}
        )


def test_cursor_offset():
    cursor = PagingCursor(page_size=500)
    assert cursor.offset == 0
    cursor.advance()
    cursor.advance()
    assert cursor.page_index == 2
    assert cursor.offset == 1000


def test_cursor_page_size_positive():
    with pytest.raises(ValidationError):
        PagingCursor(page_size=0)


@pytest.mark.parametrize("status,ok", [(200, True), (204, True), (304, False), (404, False), (500, False)])
def test_source_response_ok(status, ok):
    assert SourceResponse(status=status).ok is ok


def test_error_responses():
    assert BadStatusError(500).to_response().model_dump(exclude_none=True) == {
        "error": "BAD_STATUS",
        "detail": "Response status: 500",
    }
    err = TransportError(TimeoutError("slow"))
    assert err.to_response().error == "TRANSPORT_ERROR"
    assert "slow" in err.to_response().detail


@pytest.mark.parametrize("coordinates", [["100.5", "13.7"], [True, 1.0], [None, 1.0]])
def test_point_requires_numbers(coordinates):
    with pytest.raises(ValidationError):
        PointGeometry(coordinates=coordinates)


def test_point_accepts_integers():
    assert PointGeometry(coordinates=[100, 13]).coordinates == (100.0, 13.0)
