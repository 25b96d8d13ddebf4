from delivery_quote.models.domain import ZoneKind
from delivery_quote.services.zoning.cross_zone import HARDCODED_CROSS_ZONE_FEE, CrossZoneFeeTable
from delivery_quote.services.zoning.resolver import ZoneResolver

from conftest import CITY_A, NOWHERE, REGIONAL, north_of


def test_city_zone_takes_precedence_over_overlapping_regional_zone(make_zone) -> None:
    city = make_zone("MKD-AA", CITY_A)
    regional = make_zone("BN-MK", CITY_A, kind=ZoneKind.CENTROID_FALLBACK, radius_km=15)
    resolver = ZoneResolver(city_zones=[city], regional_zones=[regional], city_radius_km=5.0, city_prefix="MKD-")

    assert resolver.resolve(north_of(CITY_A, 1.0)).code == "MKD-AA"
    assert resolver.resolve(north_of(CITY_A, 8.0)).code == "BN-MK"
    assert resolver.resolve(north_of(CITY_A, 20.0)) is None


def test_city_zones_match_on_fixed_radius_not_declared_radius(make_zone) -> None:
    city = make_zone("MKD-AA", CITY_A, radius_km=1.0)
    resolver = ZoneResolver(city_zones=[city], city_radius_km=5.0)

    assert resolver.resolve(north_of(CITY_A, 3.0)) is city
    assert resolver.resolve(north_of(CITY_A, 5.5)) is None


def test_first_matching_zone_in_catalog_order_wins(make_zone) -> None:
    first = make_zone("MKD-X1", CITY_A)
    second = make_zone("MKD-X2", north_of(CITY_A, 2.0))
    point = north_of(CITY_A, 1.0)

    assert ZoneResolver(city_zones=[first, second]).resolve(point).code == "MKD-X1"
    assert ZoneResolver(city_zones=[second, first]).resolve(point).code == "MKD-X2"


def test_resolver_returns_none_outside_every_zone(resolver) -> None:
    assert resolver.resolve(NOWHERE) is None
    assert resolver.resolve(REGIONAL).code == "BN-RR"


def test_city_zone_detection_and_lookup(resolver) -> None:
    assert resolver.is_city_zone(resolver.find("MKD-AA"))
    assert not resolver.is_city_zone(resolver.find("BN-RR"))
    assert not resolver.is_city_zone(None)
    assert resolver.find("MKD-ZZ") is None
    assert [zone.code for zone in resolver.all_zones()] == ["MKD-AA", "MKD-BB", "BN-RR"]


def test_cross_zone_fee_direct_reverse_and_default() -> None:
    table = CrossZoneFeeTable.from_mapping({"default": 175, "MKD-AA": {"MKD-BB": 200}})

    assert table.fee("MKD-AA", "MKD-BB") == 200
    assert table.fee("MKD-BB", "MKD-AA") == 200
    assert table.fee("MKD-AA", "BN-RR") == 175


def test_cross_zone_fee_is_zero_within_one_zone() -> None:
    table = CrossZoneFeeTable.from_mapping({"MKD-AA": {"MKD-AA": 500}})

    assert table.fee("MKD-AA", "MKD-AA") == 0


def test_cross_zone_fee_without_catalog_default_uses_fallbacks() -> None:
    table = CrossZoneFeeTable.from_mapping({"MKD-AA": {"MKD-BB": 200}})

    assert table.fee("MKD-AA", "BN-RR", fallback=180) == 180
    assert table.fee("MKD-AA", "BN-RR") == HARDCODED_CROSS_ZONE_FEE


def test_zero_pair_fee_falls_through_to_default() -> None:
    table = CrossZoneFeeTable.from_mapping({"default": 150, "MKD-AA": {"MKD-BB": 0}, "MKD-BB": {"MKD-AA": 90}})

    assert table.fee("MKD-AA", "MKD-BB") == 90
