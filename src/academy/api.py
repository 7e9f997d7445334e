from fastapi import APIRouter

from academy.modules.auth import router as auth_router
from academy.modules.banners.router import router as banners_router
from academy.modules.categories.router import router as categories_router
from academy.modules.classes.router import router as classes_router
from academy.modules.courses.router import router as courses_router
from academy.modules.events.router import router as events_router
from academy.modules.locations.router import router as locations_router
from academy.modules.testimonials.router import router as testimonials_router
from academy.modules.users.router import router as users_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users_router, prefix="/users", tags=["Users"])

api_router.include_router(banners_router, prefix="/banners", tags=["Banners"])
api_router.include_router(categories_router, prefix="/categories", tags=["Course Categories"])
api_router.include_router(courses_router, prefix="/courses", tags=["Courses"])
api_router.include_router(classes_router, prefix="/classes", tags=["Classes"])
api_router.include_router(locations_router, prefix="/locations", tags=["Locations"])
api_router.include_router(events_router, prefix="/events", tags=["Events"])
api_router.include_router(testimonials_router, prefix="/testimonials", tags=["Testimonials"])
