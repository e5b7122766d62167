"""Unit tests for the command-line interface."""

import argparse
import json
from unittest.mock import patch

import pytest

from geofacade.geocoding import cli
from geofacade.geocoding.address import AddressRecord
from geofacade.geocoding.base import ProviderRejected
from geofacade.core.utils.geo import Coordinate


RECORD = AddressRecord(
    coordinate=Coordinate(37.7936, -122.395),
    locality="San Francisco",
    postal_code="94105",
    country="United States",
    iso_country_code="US",
    formatted_address="1 Market St, San Francisco, CA 94105, USA",
    provider="google",
)


class FakeRequest:
    def __init__(self, records=None, error=None):
        self.records = records
        self.error = error

    def __await__(self):
        return self._result().__await__()

    async def _result(self):
        if self.error is not None:
            raise self.error
        return self.records


class TestParseCoordinate:
    def test_parses_pair(self):
        assert cli.parse_coordinate("37.79,-122.39") == (37.79, -122.39)

    @pytest.mark.parametrize("value", ["37.79", "a,b", "1,2,3"])
    def test_rejects_malformed(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            cli.parse_coordinate(value)


class TestMain:
    def test_requires_address_or_reverse(self):
        with pytest.raises(SystemExit):
            cli.main([])

    def test_address_lookup_prints_json(self, capsys):
        with patch.object(cli.GeocodeService, "geocode", return_value=FakeRequest([RECORD])) as geocode:
            code = cli.main(["--address", "1 Market St", "--service", "google", "--alternative", "here", "--json"])

        assert code == 0
        geocode.assert_called_once_with("1 Market St", "google", alternative_service="here")
        output = json.loads(capsys.readouterr().out)
        assert output[0]["postal_code"] == "94105"

    def test_reverse_lookup_prints_records(self, capsys):
        with patch.object(cli.GeocodeService, "reverse_geocode", return_value=FakeRequest([RECORD])) as reverse:
            code = cli.main(["--reverse", "37.7936,-122.395"])

        assert code == 0
        assert reverse.call_args.args[:2] == ((37.7936, -122.395), "native")
        out = capsys.readouterr().out
        assert "1 result(s) via google" in out
        assert "Postal:   94105" in out

    def test_error_sets_exit_code(self, capsys):
        error = ProviderRejected("No results", provider="google", status="ZERO_RESULTS")
        with patch.object(cli.GeocodeService, "geocode", return_value=FakeRequest(error=error)):
            code = cli.main(["--address", "nowhere", "--service", "google"])

        assert code == 1
        assert "ProviderRejected" in capsys.readouterr().out
