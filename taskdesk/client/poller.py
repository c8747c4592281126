# taskdesk/client/poller.py
"""
Periodic refresh of the unread-notification count
"""

import itertools
import logging
import threading
from typing import Callable, Optional

import requests
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from taskdesk.client.api import ApiClient, ApiError
from taskdesk.config.settings import settings

logger = logging.getLogger(__name__)


class UnreadCountPoller:
    """Polls ``/notifications/unread-count`` on a fixed interval.

    Polls may overlap when the server is slow. Each poll takes a ticket when it
    starts and its answer is only kept if no later poll has answered already,
    so the newest request always wins.
    """

    JOB_ID = "poll_unread_count"

    def __init__(
        self,
        client: ApiClient,
        interval: Optional[int] = None,
        on_update: Optional[Callable[[int], None]] = None,
        scheduler: Optional[BackgroundScheduler] = None,
    ):
        self.client = client
        self.interval = interval or settings.NOTIFICATION_POLL_SECONDS
        self.on_update = on_update
        # Only a scheduler created here is shut down by stop()
        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler or BackgroundScheduler()
        self.unread_count = 0
        self.is_running = False

        self._tickets = itertools.count(1)
        self._applied_ticket = 0
        self._lock = threading.Lock()

    def start(self):
        """Start polling; the first poll runs immediately"""
        if self.is_running or not self.client.session.is_authenticated:
            return
        self.poll()
        self.scheduler.add_job(
            self.poll,
            trigger=IntervalTrigger(seconds=self.interval),
            id=self.JOB_ID,
            name="Poll Unread Notifications",
            replace_existing=True,
            max_instances=3,
            coalesce=True,
        )
        if not self.scheduler.running:
            self.scheduler.start()
        self.is_running = True
        logger.info(f"Unread count polling started every {self.interval}s")

    def stop(self):
        if not self.is_running:
            return
        if self.scheduler.get_job(self.JOB_ID):
            self.scheduler.remove_job(self.JOB_ID)
        if self._owns_scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        self.is_running = False
        logger.info("Unread count polling stopped")

    def next_ticket(self) -> int:
        with self._lock:
            return next(self._tickets)

    def apply(self, ticket: int, count: int) -> bool:
        """Record ``count`` unless a newer poll already answered"""
        with self._lock:
            if ticket < self._applied_ticket:
                return False
            self._applied_ticket = ticket
            self.unread_count = count

        if self.on_update:
            self.on_update(count)
        return True

    def poll(self) -> Optional[int]:
        if not self.client.session.is_authenticated:
            self.stop()
            return None

        ticket = self.next_ticket()
        try:
            count = self.client.unread_count()
        except ApiError as e:
            logger.warning(f"Unread count poll failed: {e}")
            if e.status_code == 401:
                self.stop()
            return None
        except requests.RequestException as e:
            logger.warning(f"Unread count poll failed: {e}")
            return None

        self.apply(ticket, count)
        return count
