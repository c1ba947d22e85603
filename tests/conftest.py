"""Shared fixtures for transport tests."""
import socket
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import pytest
from fastapi import FastAPI

from ht_jsonrpc_http.listener import Listener

HOST = "127.0.0.1"

SSL_DIR = Path(__file__).parent / "sslkeys"
SSL_CERT = str(SSL_DIR / "cert.pem")
SSL_KEY = str(SSL_DIR / "key.pem")
SSL_CA = str(SSL_DIR / "ca.pem")


def find_free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((HOST, 0))
        return sock.getsockname()[1]


@pytest.fixture
def port() -> int:
    """A local port nothing is listening on."""
    return find_free_port()


@asynccontextmanager
async def serving(app: FastAPI, port: int, ssl=None) -> AsyncIterator[Listener]:
    """Run an arbitrary app on ``HOST:port`` for the duration of the block."""
    listener = Listener(app, HOST, port, ssl=ssl)
    await listener.start()
    try:
        yield listener
    finally:
        await listener.stop()
