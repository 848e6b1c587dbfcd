from fitcheck.core.database import AsyncSessionLocal, engine


class TestDatabase:
    def test_engine_pings_pooled_connections(self):
        assert engine.sync_engine.pool._pre_ping is True

    def test_sessions_keep_rows_after_commit(self):
        assert AsyncSessionLocal.kw["expire_on_commit"] is False
