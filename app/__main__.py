from __future__ import annotations

from pathlib import Path

import uvicorn

from .config import settings


def main():
    tls = {}
    if Path(settings.tls_cert_file).is_file() and Path(settings.tls_key_file).is_file():
        tls = {'ssl_certfile': settings.tls_cert_file, 'ssl_keyfile': settings.tls_key_file}
    uvicorn.run('app.main:app', host=settings.app_host, port=settings.app_port, log_level=settings.log_level, **tls)


if __name__ == '__main__':
    main()
