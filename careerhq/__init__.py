"""
CareerHQ
Back end for a study-abroad consultancy's website and admin back-office.

Architecture:
- MongoDB: countries, universities, courses, blog posts, leads
- Cloudinary: hosted images (flags, campus photos, blog covers)
- FastAPI: public and admin REST API
"""

__version__ = "1.0.0"
