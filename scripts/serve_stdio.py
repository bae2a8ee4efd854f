# scripts/serve_stdio.py
"""Line-delimited JSON-RPC server: one request per stdin line, one response per stdout line."""
import sys
import logging
from pathlib import Path

# Add the parent directory to the Python path properly
current_dir = Path(__file__).resolve().parent
project_dir = current_dir.parent
sys.path.insert(0, str(project_dir))

from config import Config
from scripture_service import get_service
from utils.rpc import build_dispatcher

logger = logging.getLogger('serve_stdio')


def serve(dispatcher, stdin=sys.stdin, stdout=sys.stdout):
    logger.info("Starting MCP Scripture Server...")
    for line in stdin:
        response = dispatcher.handle_line(line)
        if response is None:
            continue
        stdout.write(response + "\n")
        stdout.flush()


if __name__ == '__main__':
    # stdout carries the protocol, so logs go to stderr
    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )
    serve(build_dispatcher(get_service()))
