from __future__ import annotations

from world_api.repository.city import CityRepository
from world_api.repository.country import CountryRepository
from world_api.repository.language import LanguageRepository
from world_api.schemas.city import CityCreate, CityFilter, CityUpdate
from world_api.schemas.country import CountryCreate, CountryFilter, CountryUpdate
from world_api.schemas.country_language import LanguageDetailCreate
from world_api.schemas.language import LanguageCreate, LanguageFilter, LanguageUpdate
from world_api.service.world import WorldService, is_valid_code, is_valid_city_id


def _usa() -> CountryCreate:
    return CountryCreate(
        country_code="USA",
        country_code2="US",
        country_name="United States of America",
        continent="North America",
    )


def test_identifier_guards() -> None:
    assert is_valid_code("US")
    assert is_valid_code("usa")
    assert not is_valid_code("U")
    assert not is_valid_code("USAA")
    assert not is_valid_code(None)
    assert is_valid_city_id(1)
    assert not is_valid_city_id(0)
    assert not is_valid_city_id(-5)
    assert not is_valid_city_id(True)


def test_initialize_resets_the_store(service: WorldService) -> None:
    service.delete_country("USA")
    assert service.get_country("USA") is None

    result = service.initialize()

    assert result.code == 200
    assert result.data == {"statements": 16}
    assert service.get_country("USA").capital.city_id == 8321


def test_initialize_with_missing_script(engine, tmp_path) -> None:
    service = WorldService(
        CountryRepository(engine),
        CityRepository(engine),
        LanguageRepository(engine),
        schema_file=tmp_path / "missing.sql",
        data_file=tmp_path / "missing.sql",
    )
    assert service.initialize().code == 500


def test_name_searches_are_substring_searches(service: WorldService) -> None:
    assert [c.country_code for c in service.get_countries(CountryFilter(country_name="land"))] == ["NZL", "CHE"]
    assert [c.city_name for c in service.get_cities(CityFilter(city_name="new"))] == ["New Delhi", "New York"]
    assert [l.language_code for l in service.get_languages(LanguageFilter(language_name="ench"))] == ["FRA"]


def test_empty_filters_return_everything(service: WorldService) -> None:
    assert len(service.get_countries()) == 20
    assert len(service.get_countries(CountryFilter())) == 20
    assert len(service.get_cities(CityFilter())) == 34
    assert len(service.get_languages(None)) == 15


def test_city_filter_by_country_only(service: WorldService) -> None:
    assert {c.city_name for c in service.get_cities(CityFilter(country_code="CH"))} == {"Bern", "Zürich", "Geneve"}
    assert [c.city_name for c in service.get_cities(CityFilter(country_code="CH", is_capital=True))] == ["Bern"]


def test_invalid_identifiers_return_nothing(service: WorldService) -> None:
    assert service.get_country("X") is None
    assert service.get_city(0) is None
    assert service.get_language("ENGL") is None
    assert service.get_languages_for_country("X") == []
    assert service.get_countries_for_language(None) == []
    assert service.get_language_for_country("USA", "E") is None


def test_invalid_identifiers_are_bad_requests(service: WorldService) -> None:
    assert service.update_country("X", CountryUpdate(country_name="A")).code == 400
    assert service.delete_country("ABCD").code == 400
    assert service.update_city(0, CityUpdate(city_population=1)).code == 400
    assert service.delete_city(-1).code == 400
    assert service.delete_language("").code == 400
    assert service.set_capital("CAN", 0).code == 400
    assert service.add_language_detail("X", LanguageDetailCreate(language_code="ENG")).code == 400
    assert service.update_language_detail("USA", "E", None).code == 400
    assert service.delete_language_detail(None, "ENG").code == 400


def test_invalid_payloads_are_bad_requests(service: WorldService) -> None:
    assert service.add_country(None).code == 400
    assert service.add_country(CountryCreate(country_code="NLD", country_name="Netherlands")).code == 400
    assert service.add_city(CityCreate()).code == 400
    assert service.add_language(LanguageCreate(language_code="SWE")).code == 400
    assert service.update_country("CAN", CountryUpdate()).code == 400
    assert service.update_language("ENG", None).code == 400


def test_add_country_rejects_duplicates(service: WorldService) -> None:
    result = service.add_country(_usa())
    assert result.code == 409
    assert result.data.country_code == "USA"

    same_alpha2 = CountryCreate(country_code="XUS", country_code2="US", country_name="Other", continent="Nowhere")
    assert service.add_country(same_alpha2).code == 409


def test_add_country_after_delete(service: WorldService) -> None:
    assert service.delete_country("USA").code == 200

    result = service.add_country(_usa())

    assert result.code == 200
    assert result.data.country_code == "USA"
    assert service.get_country("US").country_code == "USA"


def test_capital_must_exist(service: WorldService) -> None:
    service.delete_country("USA")
    missing_capital = _usa().model_copy(update={"country_capital": 999999})
    assert service.add_country(missing_capital).code == 404
    assert service.update_country("CAN", CountryUpdate(country_capital=999999)).code == 404


def test_set_capital(service: WorldService) -> None:
    result = service.set_capital("CA", 1810)
    assert result.code == 200
    assert result.data.capital.city_id == 1810
    assert result.data.capital.city_name == "Toronto"

    assert service.set_capital("CAN", 1810).code == 304
    assert service.set_capital("CAN", 999999).code == 404
    assert service.set_capital("ZZZ", 1810).code == 404


def test_add_city_with_unknown_country(service: WorldService) -> None:
    assert service.add_city(CityCreate(city_name="Atlantis", country_code="ZZ")).code == 404


def test_add_language_rejects_duplicates(service: WorldService) -> None:
    assert service.add_language(LanguageCreate(language_code="ENG", language_name="English")).code == 409
    assert service.add_language(LanguageCreate(language_code="XEN", language_code2="EN", language_name="X")).code == 409
    assert service.add_language(LanguageCreate(language_code="SWE", language_name="Swedish")).code == 200


def test_language_detail_rules(service: WorldService) -> None:
    duplicate = service.add_language_detail("USA", LanguageDetailCreate(language_code="EN"))
    assert duplicate.code == 409
    assert duplicate.data.language.language_code == "ENG"

    assert service.add_language_detail("USA", LanguageDetailCreate(language_code="FR")).code == 200
    assert service.delete_language_detail("USA", "FRA").code == 200
    assert service.delete_language_detail("USA", "FRA").code == 404


def test_update_country_to_a_code_in_use(service: WorldService) -> None:
    result = service.update_country("CAN", CountryUpdate(country_code2="US"))
    assert result.code == 409
    assert result.data.country_code == "USA"

    assert service.update_country("CAN", CountryUpdate(country_code="USA")).code == 409
    assert service.get_country("CAN").country_code2 == "CA"

    # keeping its own codes is not a conflict
    assert service.update_country("CAN", CountryUpdate(country_code="CAN", country_code2="CA")).code == 304


def test_update_language_to_a_code_in_use(service: WorldService) -> None:
    result = service.update_language("FRA", LanguageUpdate(language_code2="EN"))
    assert result.code == 409
    assert result.data.language_code == "ENG"

    assert service.update_language("FR", LanguageUpdate(language_code="DEU")).code == 409
    assert service.get_language("FRA").language_code2 == "FR"
    assert service.update_language("FRA", LanguageUpdate(language_code2="FR")).code == 304
