from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from . import __version__
from .batch import BatchImporter, ChangeSetCounter, Decoders, import_csv
from .config import configure_logging, load_settings
from .models import (
    DecodeRequest,
    DesignCodeDecodeResponse,
    FogSignalDecodeResponse,
    HealthResponse,
    ImportResponse,
    LightDecodeResponse,
)
from .tags import emit_tag_pairs
from .vocabulary import load_vocabulary

settings = load_settings()
configure_logging(settings.log_level)

vocabulary = load_vocabulary(settings.vocabulary_path)
decoders = Decoders.create(vocabulary)
importer = BatchImporter(decoders, max_workers=settings.max_workers)
changesets = ChangeSetCounter(settings.changeset_start)

app = FastAPI(
    title="aton-notation",
    description="Decoding of AtoN light, fog signal and design code notation into seamark tags",
    version=__version__,
)

@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True, "vocabulary_version": vocabulary.version}

@app.post("/decode/light", response_model=LightDecodeResponse)
def decode_light(request: DecodeRequest):
    record = decoders.light.decode(request.value)
    return LightDecodeResponse(record=record, tags=emit_tag_pairs(record))

@app.post("/decode/fog", response_model=FogSignalDecodeResponse)
def decode_fog_signal(request: DecodeRequest):
    record = decoders.fog_signal.decode(request.value)
    return FogSignalDecodeResponse(record=record, tags=emit_tag_pairs(record))

@app.post("/decode/design", response_model=DesignCodeDecodeResponse)
def decode_design_code(request: DecodeRequest):
    record = decoders.design_code.decode(request.value)
    return DesignCodeDecodeResponse(record=record, tags=emit_tag_pairs(record))

@app.post("/import", response_model=ImportResponse)
async def import_atons(file: UploadFile = File(...)):
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    raw = await file.read()
    return await run_in_threadpool(import_csv, raw, importer, changesets)
