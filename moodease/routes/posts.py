import logging

from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import jwt_required
from sqlalchemy.orm import lazyload

from moodease.errors import BadRequest, NotFound
from moodease.models import CommunityPost, db
from moodease.routes import json_body, require_fields
from moodease.security import current_account_id

logger = logging.getLogger(__name__)

bp = Blueprint("posts", __name__, url_prefix="/api/posts")


def locked_post_query(post_id):
    # the author join is left out so only the post row is locked
    return (
        CommunityPost.query
        .options(lazyload(CommunityPost.author))
        .filter_by(id=post_id)
        .with_for_update()
    )


@bp.route("", methods=["GET"])
@jwt_required()
def list_posts():
    posts = (
        CommunityPost.query
        .order_by(CommunityPost.created_at.desc(), CommunityPost.id.desc())
        .limit(current_app.config["POSTS_LIMIT"])
        .all()
    )
    return jsonify([p.to_dict() for p in posts])


@bp.route("", methods=["POST"])
@jwt_required()
def create_post():
    data = json_body()
    content = data.get("content")
    if not isinstance(content, str) or not content.strip():
        raise BadRequest("Post content cannot be empty")

    post = CommunityPost(user_id=current_account_id(), content=content, reactions={})
    db.session.add(post)
    db.session.commit()

    logger.info("Account %s created post %s", post.user_id, post.id)
    return jsonify(post.to_dict()), 201


@bp.route("/<int:post_id>", methods=["DELETE"])
@jwt_required()
def delete_post(post_id):
    account_id = current_account_id()
    deleted = CommunityPost.query.filter_by(id=post_id, user_id=account_id).delete()
    if not deleted:
        db.session.rollback()
        raise NotFound("Post not found or not authorized")
    db.session.commit()

    logger.info("Account %s deleted post %s", account_id, post_id)
    return jsonify({"message": "Post deleted"})


@bp.route("/<int:post_id>/react", methods=["PUT"])
@jwt_required()
def react(post_id):
    data = json_body()
    require_fields(data, "emoji")
    emoji = data["emoji"]
    if not isinstance(emoji, str):
        raise BadRequest("emoji must be a string")

    post = locked_post_query(post_id).first()
    if post is None:
        db.session.rollback()
        raise NotFound("Post not found")

    reactions = dict(post.reactions or {})
    reactions[emoji] = reactions.get(emoji, 0) + 1
    post.reactions = reactions
    db.session.commit()

    return jsonify({"reactions": reactions})
