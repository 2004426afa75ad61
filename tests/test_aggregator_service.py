import unittest

from package_extra.application.aggregator_service import AggregatorService
from package_extra.domain.exceptions import DatabaseException
from package_extra.domain.models import AggregatedRecord, ExtraField, DEFAULT_UNITY_VERSION


class _FakeCatalog:
    def __init__(self, names, missing=()) -> None:
        self.names = list(names)
        self.missing = set(missing)

    def list_all(self):
        return list(self.names)

    def exists(self, package_name) -> bool:
        return package_name in self.names and package_name not in self.missing


class _FakeRepository:
    def __init__(self, values=None, aggregated=None) -> None:
        self.values = dict(values or {})
        self.aggregated = aggregated
        self.reads = []
        self.aggregated_writes = 0

    async def get_field(self, field, package_name):
        self.reads.append(field)
        return self.values.get((field, package_name))

    async def set_aggregated(self, records) -> None:
        self.aggregated_writes += 1
        self.aggregated = dict(records)


class TestAggregatorService(unittest.IsolatedAsyncioTestCase):
    async def test_scenario_stars_with_defaults(self) -> None:
        repository = _FakeRepository({(ExtraField.STARS, "com.foo.bar"): 42})

        records = await AggregatorService(_FakeCatalog(["com.foo.bar"]), repository).aggregate()

        self.assertEqual(
            records["com.foo.bar"],
            AggregatedRecord(stars=42, unity=DEFAULT_UNITY_VERSION, image_url=None, time=None),
        )
        self.assertEqual(repository.aggregated, records)

    async def test_unset_package_gets_all_defaults(self) -> None:
        repository = _FakeRepository()

        records = await AggregatorService(_FakeCatalog(["com.empty"]), repository).aggregate()

        record = records["com.empty"]
        self.assertEqual(record.stars, 0)
        self.assertEqual(record.unity, "2018.1")
        self.assertIsNone(record.image_url)
        self.assertIsNone(record.time)

    async def test_stored_values_are_used(self) -> None:
        repository = _FakeRepository({
            (ExtraField.STARS, "com.a"): 7,
            (ExtraField.UNITY_VERSION, "com.a"): "2019.4",
            (ExtraField.IMAGE_URL, "com.a"): "https://repository-images.githubusercontent.com/1",
            (ExtraField.UPDATED_TIME, "com.a"): 1577836800000,
            (ExtraField.README, "com.a"): "# a",
        })

        records = await AggregatorService(_FakeCatalog(["com.a"]), repository).aggregate()

        self.assertEqual(
            records["com.a"],
            AggregatedRecord(
                stars=7,
                unity="2019.4",
                image_url="https://repository-images.githubusercontent.com/1",
                time=1577836800000,
            ),
        )
        self.assertNotIn(ExtraField.README, repository.reads)

    async def test_empty_image_url_is_absent(self) -> None:
        repository = _FakeRepository({(ExtraField.IMAGE_URL, "com.a"): ""})

        records = await AggregatorService(_FakeCatalog(["com.a"]), repository).aggregate()

        self.assertIsNone(records["com.a"].image_url)

    async def test_one_record_per_enumerated_package_and_stale_entries_pruned(self) -> None:
        stale = {"com.removed": AggregatedRecord(stars=99)}
        repository = _FakeRepository(
            {(ExtraField.STARS, "com.removed"): 99},
            aggregated=stale,
        )
        catalog = _FakeCatalog(["com.a", "com.b", "com.gone"], missing={"com.gone"})

        with self.assertLogs("package_extra.application.aggregator_service", level="ERROR"):
            records = await AggregatorService(catalog, repository).aggregate()

        self.assertEqual(set(records), {"com.a", "com.b"})
        self.assertEqual(set(repository.aggregated), {"com.a", "com.b"})
        self.assertEqual(repository.aggregated_writes, 1)

    async def test_read_failure_leaves_previous_aggregation(self) -> None:
        previous = {"com.a": AggregatedRecord(stars=1)}

        class _BrokenRepository(_FakeRepository):
            async def get_field(self, field, package_name):
                if package_name == "com.b":
                    raise DatabaseException("connection lost")
                return await super().get_field(field, package_name)

        repository = _BrokenRepository(aggregated=previous)

        with self.assertRaises(DatabaseException):
            await AggregatorService(_FakeCatalog(["com.a", "com.b"]), repository).aggregate()

        self.assertIs(repository.aggregated, previous)
        self.assertEqual(repository.aggregated_writes, 0)

    async def test_aggregation_is_deterministic(self) -> None:
        values = {(ExtraField.STARS, "com.a"): 3, (ExtraField.UNITY_VERSION, "com.b"): "2021.3"}
        catalog = _FakeCatalog(["com.a", "com.b"])

        first = await AggregatorService(catalog, _FakeRepository(values)).aggregate()
        second = await AggregatorService(catalog, _FakeRepository(values)).aggregate()

        self.assertEqual(first, second)
