"""Main entry point for the Stapler document service API."""
import logging
from dataclasses import asdict
from typing import List, Optional
from urllib.parse import quote

import tiktoken
from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, Response

from config import PORT, LOG_LEVEL, CORS_ORIGINS, GROQ_API_KEY, MAX_FORMAT_INPUT_TOKENS
from logger import setup_logging
from models.api import (
    ConvertResponse, LayoutRequest, LayoutResponse, FormatRequest, FormatResponse,
)
from models.layout import ConfigurationError
from services.document_converter import DocumentConverter, FileTooLargeError
from services.layout_engine import layout
from services.llm_client import LLMClient, LLMClientError
from services.pdf_tools import PdfToolError, UnsupportedFileError, merge_pdfs, photos_to_pdf

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Stapler",
    description="Text-to-PDF conversion, PDF combining and AI document formatting",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services (will be done on startup)
document_converter: DocumentConverter = None
llm_client: Optional[LLMClient] = None
tiktoken_encoder = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global document_converter, llm_client, tiktoken_encoder

    setup_logging(LOG_LEVEL)
    logger.info("Initializing Stapler services...")

    try:
        document_converter = DocumentConverter()
        logger.info("Initialized DocumentConverter")

        # Token counting for the formatter's input budget
        tiktoken_encoder = tiktoken.get_encoding("o200k_base")
        logger.info("Initialized tiktoken encoder (o200k_base)")

        if GROQ_API_KEY:
            llm_client = LLMClient()
            logger.info("Initialized LLMClient")
        else:
            logger.warning("GROQ_API_KEY not set; AI formatting is disabled")

        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Stapler API"}


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "stapler",
        "version": "1.0.0",
        "ai_formatting": llm_client is not None
    }


@app.post("/convert", response_model=ConvertResponse)
async def convert_endpoint(file: Optional[UploadFile] = File(None)) -> ConvertResponse:
    """
    Convert an uploaded image, text file or word-processor document to PDF.

    The PDF is kept in the work directory; fetch it with /convert/download.

    Raises:
        HTTPException: 400 for a missing, oversized or unsupported file,
            500 when conversion fails
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")

    try:
        document_converter.check_size(file.size)
        data = await file.read()
        file_id = document_converter.convert(file.filename, data)
    except (FileTooLargeError, UnsupportedFileError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error processing file {file.filename}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to process file")

    return ConvertResponse(success=True, message="File converted successfully", file_id=file_id)


@app.get("/convert/download")
async def download_endpoint(fileId: Optional[str] = None):
    """Download a converted PDF by id."""
    if not fileId:
        raise HTTPException(status_code=400, detail="No file ID provided")

    try:
        pdf_path = document_converter.get_pdf_path(fileId)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="File not found")

    return FileResponse(
        pdf_path,
        media_type="application/pdf",
        filename="converted-document.pdf"
    )


@app.post("/layout", response_model=LayoutResponse)
async def layout_endpoint(request: LayoutRequest) -> LayoutResponse:
    """Lay out text and return the page records for a preview."""
    try:
        pages = layout(request.text, request.filename)
    except ConfigurationError as e:
        logger.error(f"Invalid page geometry: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return LayoutResponse(
        total_pages=len(pages),
        pages=[asdict(page) for page in pages]
    )


@app.post("/combine")
async def combine_endpoint(
    files: List[UploadFile] = File(...),
    output_name: str = Form("combined.pdf")
):
    """Merge uploaded PDFs, in upload order, into one document."""
    if len(files) < 2:
        raise HTTPException(status_code=400, detail="You need at least 2 PDF files to combine.")

    inputs = [(upload.filename, await upload.read()) for upload in files]

    try:
        merged = merge_pdfs(inputs)
    except PdfToolError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _pdf_attachment(merged, output_name)


@app.post("/photos")
async def photos_endpoint(
    files: List[UploadFile] = File(...),
    output_name: str = Form("photos.pdf")
):
    """Build a PDF with one uploaded photo per page."""
    images = [(upload.filename, await upload.read()) for upload in files]

    try:
        pdf_bytes = photos_to_pdf(images)
    except PdfToolError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _pdf_attachment(pdf_bytes, output_name)


@app.post("/ai/format", response_model=FormatResponse)
async def format_endpoint(request: FormatRequest) -> FormatResponse:
    """
    Restructure text with the AI formatter.

    Raises:
        HTTPException: 400 without text, 413 over the input token budget,
            500 when no API key is configured, 503 on LLM failures
    """
    if not request.text:
        raise HTTPException(status_code=400, detail="Text content is required")

    if llm_client is None:
        raise HTTPException(status_code=500, detail="API key is not configured")

    input_tokens = len(tiktoken_encoder.encode(request.text))
    if input_tokens > MAX_FORMAT_INPUT_TOKENS:
        raise HTTPException(
            status_code=413,
            detail=f"Text is too long to format ({input_tokens} tokens, limit {MAX_FORMAT_INPUT_TOKENS})"
        )

    logger.info(f"Formatting text: template={request.template}, input_tokens={input_tokens}")

    try:
        llm_response = llm_client.format_text(request.text, request.template)
    except LLMClientError as e:
        logger.error(f"LLM client error: {e.error.message}")
        raise HTTPException(
            status_code=503,
            detail={
                "error": {
                    "code": e.error.code,
                    "message": e.error.message,
                    "details": e.error.details
                }
            }
        )

    return FormatResponse(
        formatted_text=llm_response.text,
        model_used=llm_response.model_used,
        tokens_input=llm_response.tokens_input,
        tokens_output=llm_response.tokens_output,
        latency_ms=llm_response.latency_ms
    )


def _pdf_attachment(data: bytes, filename: str) -> Response:
    filename = "".join(ch for ch in filename if ch not in '"\\\r\n')
    if not filename.lower().endswith(".pdf"):
        filename = f"{filename}.pdf"
    # Header values must be latin-1; non-ASCII names go in filename* (RFC 6266)
    fallback = filename.encode("ascii", errors="replace").decode("ascii")
    disposition = f'attachment; filename="{fallback}"'
    if fallback != filename:
        disposition += f"; filename*=UTF-8''{quote(filename)}"
    return Response(
        content=data,
        media_type="application/pdf",
        headers={"Content-Disposition": disposition}
    )


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Stapler API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
