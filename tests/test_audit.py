"""
Test suite for audit module

Tests hash-chained audit trail, tamper detection and integrity verification.
"""

from atm_ledger.audit import AuditTrail, AuditEventType


class TestAuditTrail:
    """Test AuditTrail functionality"""

    def test_log_event_chains_hashes(self):
        trail = AuditTrail()
        first = trail.log_event(AuditEventType.LOGIN_SUCCESS, "123456")
        second = trail.log_event(AuditEventType.LOGOUT, "123456")

        assert first.previous_hash == ""
        assert second.previous_hash == first.current_hash
        assert first.verify_hash()
        assert second.verify_hash()
        assert trail.count_events() == 2

    def test_metadata_is_copied(self):
        trail = AuditTrail()
        metadata = {"failed_attempts": 1}
        event = trail.log_event(AuditEventType.LOGIN_FAILED, "123456", metadata)
        metadata["failed_attempts"] = 99
        assert event.metadata["failed_attempts"] == 1

    def test_queries(self):
        trail = AuditTrail()
        trail.log_event(AuditEventType.LOGIN_FAILED, "123456")
        trail.log_event(AuditEventType.LOGIN_SUCCESS, "234567")
        trail.log_event(AuditEventType.LOGIN_FAILED, "234567")

        assert len(trail.get_events_for_entity("234567")) == 2
        assert len(trail.get_events_by_type(AuditEventType.LOGIN_FAILED)) == 2
        assert [e.entity_id for e in trail.get_all_events()] == ["123456", "234567", "234567"]

    def test_verify_integrity_clean(self):
        trail = AuditTrail()
        assert trail.verify_integrity()['valid']
        for _ in range(5):
            trail.log_event(AuditEventType.LOGIN_FAILED, "123456")
        result = trail.verify_integrity()
        assert result['valid']
        assert result['total_events'] == 5

    def test_detects_tampered_metadata(self):
        trail = AuditTrail()
        trail.log_event(AuditEventType.LOGIN_FAILED, "123456", {"failed_attempts": 1})
        event = trail.get_all_events()[0]
        event.metadata["failed_attempts"] = 0

        result = trail.verify_integrity()
        assert not result['valid']
        assert result['hash_errors'][0]['event_id'] == event.id

    def test_detects_chain_break(self):
        trail = AuditTrail()
        trail.log_event(AuditEventType.LOGIN_FAILED, "123456")
        second = trail.log_event(AuditEventType.LOGIN_FAILED, "123456")
        second.previous_hash = "forged"
        second.current_hash = second.calculate_hash()

        result = trail.verify_integrity()
        assert not result['valid']
        assert result['hash_errors'] == []
        assert result['chain_breaks'][0]['position'] == 1
