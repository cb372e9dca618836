import os
from celery import Celery
from dotenv import load_dotenv

load_dotenv()

broker = os.getenv("REDIS_URL", "redis://localhost:6379/0")
backend = broker

celery = Celery("coverage_workers", broker=broker, backend=backend, include=["workers.tasks"])
celery.conf.task_routes = {
    "tasks.refresh_user_coverage": {"queue": "coverage"},
    "tasks.recalculate_item_coverage": {"queue": "coverage"},
}
