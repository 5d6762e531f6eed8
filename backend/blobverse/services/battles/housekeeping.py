"""Periodic background work for the battle server.

Two independent loops: a pairing sweep that re-runs matchmaking in case an
event-driven attempt was missed, and a stats log line. Neither runs under
TESTING; the ``sweep``/``report`` steps can be invoked directly instead.
"""


class Housekeeping:
    def __init__(self, app, socketio, server):
        self.app = app
        self.socketio = socketio
        self.server = server
        self._running = False

    def sweep(self) -> int:
        formed = self.server.process_matchmaking()
        if formed:
            self.app.logger.info(f"[sweep] formed {formed} match(es) from the queue")
        return formed

    def report(self) -> dict:
        stats = self.server.stats()
        self.app.logger.info(
            f"[stats] connections={stats['connections']} queue={stats['queue']} battles={stats['battles']}"
        )
        return stats

    def start(self) -> None:
        if self.app.config.get('TESTING') or self._running:
            return
        self._running = True
        sweep_sec = int(self.app.config.get('MATCHMAKING_SWEEP_SEC', 5))
        stats_sec = int(self.app.config.get('STATS_INTERVAL_SEC', 30))
        if sweep_sec > 0:
            self.socketio.start_background_task(self._loop, self.sweep, sweep_sec)
        if stats_sec > 0:
            self.socketio.start_background_task(self._loop, self.report, stats_sec)
        self.app.logger.info(f"[housekeeping] sweep={sweep_sec}s stats={stats_sec}s")

    def stop(self) -> None:
        self._running = False

    def _loop(self, step, interval: int) -> None:
        while self._running:
            self.socketio.sleep(interval)
            if not self._running:
                return
            try:
                step()
            except Exception:
                # Keep the timer alive; the next tick retries
                self.app.logger.exception(f"[housekeeping] {step.__name__} failed")
