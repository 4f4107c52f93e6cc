from __future__ import annotations

from typing import Iterator

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ftpvfs.api.schemas.sessions import (
    CwdResponse,
    MkdirRequest,
    PathRequest,
    RenameRequest,
    ResolvedPathResponse,
    SessionResponse,
    StatResponse,
)
from ftpvfs.core.path_safety import (
    NotADirectoryPathError,
    PathSafetyError,
    TraversalRefusedError,
)
from ftpvfs.sessions.service import (
    SessionLimitError,
    SessionNotFoundError,
    SessionRegistry,
    get_session_registry,
)
from ftpvfs.vfs.session import VfsSession

router = APIRouter(prefix="/sessions", tags=["sessions"])

_OPERATION_ERRORS = (PathSafetyError, OSError)


def _to_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, TraversalRefusedError):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, NotADirectoryPathError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, PathSafetyError):
        code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(exc, FileNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, FileExistsError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, PermissionError):
        code = status.HTTP_403_FORBIDDEN
    else:
        code = status.HTTP_409_CONFLICT
    detail = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
    return HTTPException(status_code=code, detail=detail)


def get_session(session_id: str, registry: SessionRegistry = Depends(get_session_registry)) -> Iterator[VfsSession]:
    try:
        with registry.lease(session_id) as session:
            yield session
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def open_session(registry: SessionRegistry = Depends(get_session_registry)) -> SessionResponse:
    try:
        session_id, session = registry.open()
    except SessionLimitError as exc:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(exc)) from exc
    return SessionResponse(session_id=session_id, cwd=session.get_cwd())


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def close_session(session_id: str, registry: SessionRegistry = Depends(get_session_registry)) -> Response:
    try:
        registry.close(session_id)
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{session_id}/cwd", response_model=CwdResponse)
def get_cwd(session: VfsSession = Depends(get_session)) -> CwdResponse:
    return CwdResponse(cwd=session.get_cwd())


@router.post("/{session_id}/chdir", response_model=CwdResponse)
def change_directory(request: PathRequest, session: VfsSession = Depends(get_session)) -> CwdResponse:
    try:
        cwd = session.chdir(request.path)
    except _OPERATION_ERRORS as exc:
        raise _to_http_error(exc) from exc
    return CwdResponse(cwd=cwd)


@router.post("/{session_id}/resolve", response_model=ResolvedPathResponse)
def resolve_path(request: PathRequest, session: VfsSession = Depends(get_session)) -> ResolvedPathResponse:
    try:
        resolved = session.resolve_for_read_or_write(request.path)
    except _OPERATION_ERRORS as exc:
        raise _to_http_error(exc) from exc
    return ResolvedPathResponse(path=resolved.path)


@router.post("/{session_id}/mkdir", response_model=ResolvedPathResponse, status_code=status.HTTP_201_CREATED)
def make_directory(request: MkdirRequest, session: VfsSession = Depends(get_session)) -> ResolvedPathResponse:
    try:
        target = session.mkdir(request.path, request.mode)
    except _OPERATION_ERRORS as exc:
        raise _to_http_error(exc) from exc
    return ResolvedPathResponse(path=target)


@router.post("/{session_id}/rmdir", status_code=status.HTTP_204_NO_CONTENT)
def remove_directory(request: PathRequest, session: VfsSession = Depends(get_session)) -> Response:
    try:
        session.rmdir(request.path)
    except _OPERATION_ERRORS as exc:
        raise _to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{session_id}/remove", status_code=status.HTTP_204_NO_CONTENT)
def remove_file(request: PathRequest, session: VfsSession = Depends(get_session)) -> Response:
    try:
        session.remove(request.path)
    except _OPERATION_ERRORS as exc:
        raise _to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{session_id}/rename", status_code=status.HTTP_204_NO_CONTENT)
def rename(request: RenameRequest, session: VfsSession = Depends(get_session)) -> Response:
    try:
        session.rename(request.from_path, request.to_path)
    except _OPERATION_ERRORS as exc:
        raise _to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{session_id}/stat", response_model=StatResponse)
def stat_path(request: PathRequest, session: VfsSession = Depends(get_session)) -> StatResponse:
    try:
        result = session.stat(request.path)
    except _OPERATION_ERRORS as exc:
        raise _to_http_error(exc) from exc
    return StatResponse(
        path=request.path,
        mode=result.mode,
        size=result.size,
        mtime=result.mtime,
        is_dir=result.is_dir,
        is_file=result.is_file,
    )
