from app.core.constants import RegionLevel
from app.db.seed import COUNTRY_NAME, REGION_TREE, seed_regions
from app.models.region import Region


SMALL_TREE = {
    "Seoul": ["Gangnam", "Jung"],
    "Busan": ["Haeundae", "Jung"],
}


class TestSeedRegions:
    """Region seeding is a one-time, repeatable migration"""

    def test_seed_small_tree(self, db_session):
        created = seed_regions(db_session, "Korea", SMALL_TREE)

        assert created == 7
        country = db_session.query(Region).filter(Region.level == RegionLevel.COUNTRY.value).one()
        assert country.name == "Korea"
        assert country.parent_id is None
        provinces = db_session.query(Region).filter(Region.level == RegionLevel.PROVINCE.value).all()
        assert {province.name for province in provinces} == {"Seoul", "Busan"}
        assert all(province.parent_id == country.id for province in provinces)

    def test_same_city_name_under_two_provinces(self, db_session):
        seed_regions(db_session, "Korea", SMALL_TREE)
        jung = db_session.query(Region).filter(Region.name == "Jung").all()
        assert len(jung) == 2
        assert len({region.parent_id for region in jung}) == 2

    def test_second_run_creates_nothing(self, db_session):
        seed_regions(db_session, "Korea", SMALL_TREE)
        assert seed_regions(db_session, "Korea", SMALL_TREE) == 0
        assert db_session.query(Region).count() == 7

    def test_fills_in_missing_cities(self, db_session):
        seed_regions(db_session, "Korea", {"Seoul": ["Gangnam"]})
        created = seed_regions(db_session, "Korea", SMALL_TREE)
        assert created == 4
        assert db_session.query(Region).count() == 7

    def test_default_tree(self, db_session):
        created = seed_regions(db_session)

        assert created == db_session.query(Region).count()
        country = db_session.query(Region).filter(Region.parent_id.is_(None)).one()
        assert country.name == COUNTRY_NAME
        provinces = db_session.query(Region).filter(Region.parent_id == country.id).count()
        assert provinces == len(REGION_TREE) == 17
        assert seed_regions(db_session) == 0
