from fastapi import APIRouter, Depends, HTTPException, Request, status
from task_tracker.domain.task_models import Task, TaskCreate, TaskUpdate
from task_tracker.services.task_service import TaskService

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def get_service(request: Request) -> TaskService:
    # set by the app lifespan once the store is open
    svc = getattr(request.app.state, "task_service", None)
    if svc is None:
        raise RuntimeError("TaskService not wired")
    return svc


@router.get("", response_model=list[Task])
async def list_tasks(svc: TaskService = Depends(get_service)):
    return await svc.list_tasks()


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(payload: TaskCreate, svc: TaskService = Depends(get_service)):
    return await svc.create_task(payload)


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: str, svc: TaskService = Depends(get_service)):
    task = await svc.get_task(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.patch("/{task_id}", response_model=Task)
async def update_task(task_id: str, payload: TaskUpdate, svc: TaskService = Depends(get_service)):
    task = await svc.update_task(task_id, payload)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.delete("/{task_id}")
async def delete_task(task_id: str, svc: TaskService = Depends(get_service)):
    if not await svc.delete_task(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return {"message": "Task deleted"}
