import asyncio
import json
import logging
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from faceswap.config import Settings, load_settings
from faceswap.detection import FaceDetector
from faceswap.errors import CompositeError, DetectionError, FaceSwapError
from faceswap.events import get_images_from_event
from faceswap.handler import process_upload_event
from faceswap.models import EmojiCategory, parse_face_details
from faceswap.pipeline import OverlayMode, OverlayPipeline
from faceswap.services import build_detector, build_pipeline, build_store
from faceswap.storage import LocalBlobStore

logger = logging.getLogger("faceswap.api")


def _init_queue(settings: Settings):
    """Return ``(redis_conn, queue, job_cls)`` or Nones when RQ is off."""
    if settings.queue_backend != "rq":
        return None, None, None
    try:
        from redis import Redis
        from rq import Queue
        from rq.job import Job
    except ImportError as e:
        logger.error("[startup] QUEUE_BACKEND=rq but redis/rq are not installed: %s", e)
        return None, None, None
    try:
        redis_conn = Redis(host=settings.redis_host, port=settings.redis_port, db=0)
        queue = Queue(settings.rq_queue, connection=redis_conn)
    except Exception as e:
        logger.error("[startup] Redis init failed: %s", e)
        return None, None, None
    return redis_conn, queue, Job


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[LocalBlobStore] = None,
    detector: Optional[FaceDetector] = None,
    pipeline: Optional[OverlayPipeline] = None,
) -> FastAPI:
    settings = settings or load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store = store or build_store(settings)
    detector = detector or build_detector(settings)
    pipeline = pipeline or build_pipeline(settings)
    redis_conn, queue, job_cls = _init_queue(settings)

    app = FastAPI()
    app.state.settings = settings

    # --- Health ---
    @app.get("/health")
    async def health():
        return {"status": "ok", "mode": pipeline.mode.value, "queue": settings.queue_backend}

    # --- Upload events ---
    @app.post("/events")
    async def events_endpoint(request: Request):
        try:
            event = await request.json()
        except json.JSONDecodeError:
            raise HTTPException(status_code=400, detail="Event body must be JSON.")
        if not isinstance(event, dict):
            raise HTTPException(status_code=400, detail="Event body must be a JSON object.")
        logger.info("Received event with %d record(s)", len(event.get("Records") or []))

        if queue is not None:
            from faceswap.jobs import process_image_job

            images = get_images_from_event(event, settings.bucket_name, settings.allowed_extensions)
            jobs = [queue.enqueue(process_image_job, key) for key in images]
            return {
                "images": images,
                "jobs": [{"key": key, "job_id": job.id} for key, job in zip(images, jobs)],
            }

        summary = await process_upload_event(
            event,
            store=store,
            detector=detector,
            pipeline=pipeline,
            bucket_name=settings.bucket_name,
            allowed_extensions=list(settings.allowed_extensions),
            processed_dir=settings.processed_dir_name,
            max_concurrency=settings.max_concurrent_images,
        )
        results = [
            {"key": r.key, "faces": r.faces, "output_key": r.output_key, "error": r.error}
            for r in summary.results
        ]
        if summary.failed:
            return JSONResponse(status_code=500, content={"images": summary.images, "results": results})
        return {"images": summary.images, "results": results}

    @app.get("/jobs/{job_id}")
    async def job_status_endpoint(job_id: str):
        if not all([queue, redis_conn, job_cls]):
            raise HTTPException(status_code=500, detail="Job queue not configured.")
        job = job_cls.fetch(job_id, connection=redis_conn)
        if not job:
            raise HTTPException(status_code=404, detail="Job not found.")
        return {
            "status": job.get_status(refresh=False),
            "result": job.result if job.is_finished else None,
            "error": str(job.exc_info) if job.is_failed else None,
        }

    # --- Direct overlay ---
    @app.post("/overlay")
    async def overlay_endpoint(
        file: UploadFile = File(...),
        faces: Optional[str] = Form(None),
        mode: Optional[str] = Form(None),
        emoji: Optional[str] = Form(None),
    ):
        """Overlay emojis on an uploaded image and return the JPEG.

        ``faces`` is a JSON document in the Rekognition ``FaceDetails``
        shape; when omitted the configured detector is used. ``mode`` and
        ``emoji`` override the configured overlay mode and fixed emoji.
        """
        raw_data = await file.read()
        if not raw_data:
            raise HTTPException(status_code=400, detail="No image data provided.")
        key = file.filename or "upload.jpg"

        try:
            run_pipeline = pipeline
            if mode or emoji:
                run_pipeline = OverlayPipeline(
                    renderer=pipeline.renderer,
                    compositor=pipeline.compositor,
                    tracker=pipeline.tracker,
                    mode=OverlayMode(mode.lower()) if mode else pipeline.mode,
                    fixed_emoji=EmojiCategory(emoji.lower()) if emoji else pipeline.fixed_emoji,
                )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        if faces is not None:
            try:
                detected = parse_face_details(json.loads(faces))
            except (json.JSONDecodeError, ValidationError, AttributeError, TypeError) as e:
                raise HTTPException(status_code=400, detail=f"Invalid faces payload: {e}")
        else:
            try:
                # Detection and compositing block; keep them off the event loop.
                detected = await asyncio.to_thread(detector.detect, key, raw_data)
            except DetectionError as e:
                raise HTTPException(status_code=502, detail=str(e))

        try:
            new_image = await asyncio.to_thread(run_pipeline.process, key, raw_data, detected)
        except CompositeError as e:
            raise HTTPException(status_code=422, detail=str(e))
        except FaceSwapError as e:
            raise HTTPException(status_code=500, detail=str(e))
        return Response(content=new_image, media_type="image/jpeg")

    return app


app = create_app()
