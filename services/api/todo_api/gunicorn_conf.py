# gunicorn_conf.py
# gunicorn -c todo_api/gunicorn_conf.py todo_api.main:app
import multiprocessing
import os

from todo_api.common.config import Config

bind = f"{Config.UVICORN_HOST}:{Config.UVICORN_PORT}"

workers = int(os.getenv("WEB_CONCURRENCY", max(2, multiprocessing.cpu_count())))

worker_class = "uvicorn.workers.UvicornWorker"

loglevel = "info"
accesslog = None #middleware logs it
errorlog = "-"

timeout = 30
graceful_timeout = 30

reload = False
