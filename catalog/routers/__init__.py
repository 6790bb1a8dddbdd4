from .categories import router as categories_router
from .images import router as images_router
from .items import router as items_router

routes = [
    items_router,
    images_router,
    categories_router,
]
