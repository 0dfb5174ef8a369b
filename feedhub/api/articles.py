# feedhub/api/articles.py
from typing import List

from fastapi import APIRouter, Depends

from feedhub.core.deps import get_article_service
from feedhub.models.schemas import Article
from feedhub.services.articles import ArticleService

router = APIRouter(prefix="/api/articles", tags=["articles"])


@router.get("", response_model=List[Article],
            summary="Published articles, newest first")
async def api_list_articles(svc: ArticleService = Depends(get_article_service)):
    return await svc.fetch_articles()
