#!/usr/bin/env python3
import io, logging, os, tempfile
from pathlib import Path
from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, StreamingResponse
from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST

from mrf_filter.config import Settings
from mrf_filter.errors import PipelineError, StructureNotFoundError
from mrf_filter.pipeline import run_pipeline
from mrf_filter.source import open_index

app = FastAPI(title="mrf-filter")
logger = logging.getLogger(__name__)

request_counter = Counter("mrf_uploads_total", "Total index uploads")

def filter_index_file(path: str):
    """Blocking pipeline run over a spooled upload; called off the event loop."""
    with open_index(path) as index:
        return run_pipeline(index.stream, io.StringIO(), settings=Settings.from_env(),
                            counter=index.counter, total_bytes=index.total_bytes)

@app.get("/health", tags=["ops"])
def health():
    return {"status": "healthy"}

@app.get("/metrics", tags=["ops"])
def metrics():
    return StreamingResponse(iter([generate_latest()]), media_type=CONTENT_TYPE_LATEST)

@app.post("/process/file", tags=["process"])
async def process_file(file: UploadFile = File(...)):
    """Filter an uploaded index (gzip or plain JSON) and return the matched URLs."""
    request_counter.inc()
    chunk_size = 8*1024*1024  # 8 MB
    with tempfile.NamedTemporaryFile(delete=False) as tmp:
        total = 0
        while True:
            chunk = await file.read(chunk_size)
            if not chunk:
                break
            tmp.write(chunk)
            total += len(chunk)
        tmp_path = tmp.name
    try:
        result = await run_in_threadpool(filter_index_file, tmp_path)
    except StructureNotFoundError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except PipelineError as e:
        logger.error("upload %s failed: %s", file.filename, e)
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        Path(tmp_path).unlink()
    return JSONResponse({"filename": file.filename, "bytes": total, "records": result.records,
                         "skipped": result.skipped, "matches": result.found,
                         "locations": result.locations})

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
