"""Tests for the short code pool."""

import threading

import pytest

from models import CodeOwnerType, CodePoolEntry
from services.code_pool_service import (
    CodePool,
    digital_root,
    format_base,
    format_code,
    parse_code,
)
from services.exceptions import (
    AlreadyAllocated,
    ChecksumMismatch,
    InvalidCodeFormat,
    OutOfCodesError,
    UnknownBase,
    ValidationError,
)


class TestChecksum:
    """Digital root and code formatting."""

    def test_known_values(self) -> None:
        assert digital_root("001") == 1
        assert digital_root("110") == 2
        assert digital_root("999") == 9
        assert digital_root("189") == 9

    def test_every_base_has_single_digit_check(self) -> None:
        for number in range(1, 1000):
            check = digital_root(format_base(number))
            assert 1 <= check <= 9
            assert check == (number - 1) % 9 + 1

    def test_format_code(self) -> None:
        assert format_code("110", 2) == "*001*1102#"
        assert format_code("007", "7", prefix="*384*") == "*384*0077#"

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("*001*1102#", ("110", "2")),
            ("1102", ("110", "2")),
            ("*384*0077", ("007", "7")),
            (" 9999# ", ("999", "9")),
        ],
    )
    def test_parse_code(self, code, expected) -> None:
        assert parse_code(code) == expected

    @pytest.mark.parametrize("code", ["", None, "*001*12#", "abcd", "*001*110x#"])
    def test_parse_rejects_malformed(self, code) -> None:
        with pytest.raises(InvalidCodeFormat):
            parse_code(code)


class TestSeed:
    """Pool seeding."""

    def test_seed_is_idempotent(self, db) -> None:
        pool = CodePool(db)

        assert pool.seed() == 999
        assert pool.seed() == 0
        assert db.query(CodePoolEntry).count() == 999

    def test_seeded_checksums(self, pool, db) -> None:
        entry = db.get(CodePoolEntry, "110")

        assert entry.checksum_digit == "2"
        assert entry.allocated is False


class TestAssignNext:
    """Lowest-free-base allocation."""

    def test_assigns_in_order(self, pool) -> None:
        first = pool.assign_next(CodeOwnerType.TENANT, "sacco-001")
        second = pool.assign_next("VEHICLE", "KDA-123A")

        assert first == "*001*0011#"
        assert second == "*001*0022#"

    def test_records_owner(self, pool, db, clock) -> None:
        pool.assign_next(CodeOwnerType.VEHICLE, "KDA-123A")

        entry = db.get(CodePoolEntry, "001")
        db.refresh(entry)
        assert entry.allocated is True
        assert entry.owner_type == CodeOwnerType.VEHICLE
        assert entry.owner_id == "KDA-123A"
        assert entry.allocated_at == clock.now

    def test_skips_bound_codes(self, pool) -> None:
        pool.bind_specific(CodeOwnerType.TENANT, "t1", "0011")

        assert pool.assign_next(CodeOwnerType.TENANT, "t2") == "*001*0022#"

    def test_retries_when_candidate_is_taken(self, pool, db) -> None:
        rival = CodePool(db)
        real_claim_lowest = pool._claim_lowest
        calls = []

        def racing_claim_lowest(owner_type, owner_id):
            calls.append(owner_id)
            if len(calls) == 1:
                # Another administrator takes the lowest base between our read and write
                rival.bind_specific(CodeOwnerType.TENANT, "rival", "0011")
                return None
            return real_claim_lowest(owner_type, owner_id)

        pool._claim_lowest = racing_claim_lowest
        code = pool.assign_next(CodeOwnerType.VEHICLE, "V1")

        assert len(calls) == 2
        assert code == "*001*0022#"
        assert db.get(CodePoolEntry, "001", populate_existing=True).owner_id == "rival"
        assert db.get(CodePoolEntry, "002", populate_existing=True).owner_id == "V1"

    def test_exhaustion(self, pool, db) -> None:
        (
            db.query(CodePoolEntry)
            .filter(CodePoolEntry.base < "998")
            .update(
                {"allocated": True, "owner_type": CodeOwnerType.TENANT, "owner_id": "bulk"},
                synchronize_session=False,
            )
        )
        db.commit()

        assert pool.assign_next(CodeOwnerType.TENANT, "a") == "*001*9988#"
        assert pool.assign_next(CodeOwnerType.TENANT, "b") == "*001*9999#"
        with pytest.raises(OutOfCodesError):
            pool.assign_next(CodeOwnerType.TENANT, "c")

    def test_empty_pool(self, db) -> None:
        with pytest.raises(OutOfCodesError):
            CodePool(db).assign_next(CodeOwnerType.TENANT, "a")

    @pytest.mark.parametrize("owner_type,owner_id", [("BUS", "x"), (CodeOwnerType.TENANT, ""), ("TENANT", None)])
    def test_invalid_owner(self, pool, owner_type, owner_id) -> None:
        with pytest.raises(ValidationError):
            pool.assign_next(owner_type, owner_id)

    def test_custom_prefix(self, db) -> None:
        pool = CodePool(db, prefix="*384*")
        pool.seed()

        assert pool.assign_next(CodeOwnerType.TENANT, "t") == "*384*0011#"


    def test_prefix_argument_leaves_pool_default(self, pool) -> None:
        assert pool.assign_next(CodeOwnerType.TENANT, "t1", prefix="*384*") == "*384*0011#"
        assert pool.assign_next(CodeOwnerType.TENANT, "t2") == "*001*0022#"
        assert pool.prefix == "*001*"


class TestBindSpecific:
    """Binding a chosen code."""

    def test_bind_then_rebind(self, pool) -> None:
        assert pool.bind_specific(CodeOwnerType.VEHICLE, "KDA-123A", "*001*1102#") == "*001*1102#"

        with pytest.raises(AlreadyAllocated):
            pool.bind_specific(CodeOwnerType.VEHICLE, "KDB-456B", "*001*1102#")

    def test_checksum_mismatch(self, pool, db) -> None:
        with pytest.raises(ChecksumMismatch) as info:
            pool.bind_specific(CodeOwnerType.VEHICLE, "V1", "*001*1105#")

        assert info.value.base == "110"
        assert info.value.provided == "5"
        assert info.value.expected == 2
        assert db.get(CodePoolEntry, "110").allocated is False

    def test_unknown_base(self, pool) -> None:
        with pytest.raises(UnknownBase):
            pool.bind_specific(CodeOwnerType.TENANT, "t", "0000")

    def test_invalid_format(self, pool) -> None:
        with pytest.raises(InvalidCodeFormat):
            pool.bind_specific(CodeOwnerType.TENANT, "t", "*001*11#")

    def test_prefix_argument(self, pool) -> None:
        assert pool.bind_specific(CodeOwnerType.VEHICLE, "V1", "1102", prefix="*384*") == "*384*1102#"
        assert pool.prefix == "*001*"
        assert pool.full_code(pool.list_allocated()[0]) == "*001*1102#"


class TestListing:
    """Available and allocated listings."""

    def test_lists_partition_pool(self, pool) -> None:
        pool.assign_next(CodeOwnerType.TENANT, "t1")
        pool.bind_specific(CodeOwnerType.VEHICLE, "v1", "*001*1102#")

        available = pool.list_available()
        allocated = pool.list_allocated()

        assert len(available) == 997
        assert available[0].base == "002"
        assert sorted(e.base for e in allocated) == ["001", "110"]
        assert pool.full_code(allocated[0], prefix="*9*").startswith("*9*")


class TestConcurrentAssignment:
    """Parallel assign_next calls, each on its own session."""

    WORKERS = 8

    def test_parallel_assignments_get_distinct_codes(self, pool, session_factory, clock) -> None:
        barrier = threading.Barrier(self.WORKERS)
        lock = threading.Lock()
        codes, errors = [], []

        def assign(owner_id):
            session = session_factory()
            try:
                barrier.wait()
                code = CodePool(session, clock=clock).assign_next(CodeOwnerType.VEHICLE, owner_id)
                with lock:
                    codes.append(code)
            except Exception as exc:
                with lock:
                    errors.append(exc)
            finally:
                session.close()

        threads = [threading.Thread(target=assign, args=(f"V{i}",)) for i in range(self.WORKERS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=60)

        expected = {
            format_code(format_base(n), digital_root(format_base(n)))
            for n in range(1, self.WORKERS + 1)
        }
        assert errors == []
        assert len(codes) == self.WORKERS
        assert set(codes) == expected
