"""FastAPI web adapter for the Vole machine simulator."""

import io
import logging as lg

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field
from typing import Optional
from pathlib import Path

from vole import Machine, VoleError, run_program, RunOptions


# Constants
MAX_PROGRAM_SIZE = 4 * 1024
STATIC_DIR = Path(__file__).parent.parent / "static"


# Request/Response models
class RunOptionsModel(BaseModel):
    start_address: int = Field(default=0, ge=0, le=255)
    max_steps: int = Field(default=10000, ge=1, le=1000000)
    trace: bool = True
    trace_watch: list[int] = Field(default_factory=list)
    initial_memory: dict[str, int] = Field(default_factory=dict)
    initial_registers: dict[str, int] = Field(default_factory=dict)


class RunRequest(BaseModel):
    program: str
    options: Optional[RunOptionsModel] = None


class DisassembleRequest(BaseModel):
    program: str
    start_address: int = Field(default=0, ge=0, le=255)


class RunResponse(BaseModel):
    status: str
    output_text: str
    steps_executed: int
    final_state: dict
    memory: list[int]
    trace_watch: list[int]
    trace: list[dict]
    error: Optional[dict] = None


class DisassemblyLine(BaseModel):
    addr: int
    word: int
    text: str


# Create FastAPI app
app = FastAPI(
    title="Vole Machine Simulator",
    description="Web API for running hexadecimal Vole machine programs with tracing",
    version="0.1.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _check_program_size(program: str) -> None:
    if len(program) > MAX_PROGRAM_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"Program size exceeds limit of {MAX_PROGRAM_SIZE} bytes",
        )


def _int_keys(values: dict[str, int], what: str) -> dict[int, int]:
    """Convert JSON object keys to integers."""
    result = {}
    for k, v in values.items():
        try:
            result[int(k, 0)] = v
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid {what} key: {k}",
            )
    return result


@app.post("/api/run", response_model=RunResponse)
async def run_code(request: RunRequest):
    """Load and run a Vole program.

    Args:
        request: Program words and execution options

    Returns:
        Execution result with screen output, trace, and final state
    """
    _check_program_size(request.program)

    opts = request.options or RunOptionsModel()

    run_opts = RunOptions(
        start_address=opts.start_address,
        max_steps=opts.max_steps,
        trace=opts.trace,
        trace_watch=opts.trace_watch,
        initial_memory=_int_keys(opts.initial_memory, "memory address"),
        initial_registers=_int_keys(opts.initial_registers, "register"),
    )

    result = run_program(program_text=request.program, options=run_opts)
    return result.to_dict()


@app.post("/api/disassemble", response_model=list[DisassemblyLine])
async def disassemble_code(request: DisassembleRequest):
    """Describe every instruction of a program without running it."""
    _check_program_size(request.program)

    mac = Machine()
    try:
        count = mac.load_program(io.StringIO(request.program), at=request.start_address)
    except VoleError as e:
        raise HTTPException(status_code=400, detail=e.to_error_info().to_dict())

    end = request.start_address + 2 * count
    return [
        {"addr": addr, "word": word, "text": text}
        for addr, word, text in mac.disassemble(request.start_address, end)
    ]


# Mount static files AFTER API routes to prevent shadowing
if STATIC_DIR.exists():
    app.mount("/", StaticFiles(directory=str(STATIC_DIR), html=True), name="static")


if __name__ == "__main__":
    import uvicorn
    lg.basicConfig(level=lg.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8080)
