# tests/test_spots.py
import pytest
from parkdash.stats.spots import count_tracked_spots, percentage, round_half_up

def test_counts_marker_occurrences():
    descriptor = '[{"name": "A1"}, {"name": "A2"}, {"name": "A3"}]'
    assert count_tracked_spots(descriptor) == 3

@pytest.mark.parametrize('descriptor', [None, '', b''])
def test_missing_descriptor_has_no_spots(descriptor):
    assert count_tracked_spots(descriptor) == 0

def test_bytes_descriptor():
    assert count_tracked_spots(b'{"name": 1}{"name": 2}') == 2

def test_custom_marker():
    assert count_tracked_spots('spot;spot;lane', marker='spot') == 2

def test_marker_counted_anywhere_in_descriptor():
    # The token is matched wherever it appears, including inside other keys
    assert count_tracked_spots('{"name": "A1", "nickname": "x"}') == 2

def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(2.0, 2) == 2.0
    assert round_half_up(1.23456, 2) == 1.23

def test_percentage():
    assert percentage(3, 10) == 30
    assert percentage(2, 10) == 20
    assert percentage(1, 8) == 13
    assert percentage(5, 0) == 0

def test_percentage_is_capped():
    assert percentage(12, 10) == 100
