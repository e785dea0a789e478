import pytest

from blogsite.core.errors import BlogNotFound, CommentIndexOutOfRange, CommentNotFound, ConcurrentModification
from blogsite.db.session import SessionLocal
from blogsite.services.blogs import (
    append_comment,
    append_reply,
    append_reply_at,
    create_blog,
    delete_blog,
    get_blog,
    list_blogs_by_owner,
    update_blog,
)


def test_create_and_list_by_owner(db):
    blog = create_blog(db, "T", "D", None, "a@x.com")
    create_blog(db, "Other", "D", None, "b@x.com")
    assert [b.id for b in list_blogs_by_owner(db, "a@x.com")] == [blog.id]
    assert blog.comments == []


def test_get_missing_blog(db):
    with pytest.raises(BlogNotFound):
        get_blog(db, "missing")


def test_update_keeps_image_when_none_given(db):
    blog = create_blog(db, "T", "D", "1-old.png", "a@x.com")
    updated = update_blog(db, blog.id, "T2", "D2")
    assert (updated.title, updated.description, updated.image) == ("T2", "D2", "1-old.png")
    updated = update_blog(db, blog.id, "T3", "D3", "2-new.png")
    assert updated.image == "2-new.png"


def test_delete_blog(db):
    blog = create_blog(db, "T", "D", None, "a@x.com")
    delete_blog(db, blog.id)
    with pytest.raises(BlogNotFound):
        get_blog(db, blog.id)


def test_comment_then_reply_by_index(db):
    blog = create_blog(db, "T", "D", None, "a@x.com")
    append_comment(db, blog.id, "hi")
    blog = append_reply_at(db, blog.id, 0, "hey")
    assert [{"text": c["text"], "replies": c["replies"]} for c in blog.comments] == [{"text": "hi", "replies": ["hey"]}]


def test_reply_by_comment_id(db):
    blog = create_blog(db, "T", "D", None, "a@x.com")
    append_comment(db, blog.id, "first")
    blog = append_comment(db, blog.id, "second")
    second_id = blog.comments[1]["id"]
    blog = append_reply(db, blog.id, second_id, "r1")
    blog = append_reply(db, blog.id, second_id, "r2")
    assert blog.comments[0]["replies"] == []
    assert blog.comments[-1]["replies"] == ["r1", "r2"]


def test_comment_ids_are_unique(db):
    blog = create_blog(db, "T", "D", None, "a@x.com")
    append_comment(db, blog.id, "same")
    blog = append_comment(db, blog.id, "same")
    assert blog.comments[0]["id"] != blog.comments[1]["id"]


@pytest.mark.parametrize("index", [1, 5, -1])
def test_reply_out_of_range_leaves_blog_unchanged(db, index):
    blog = create_blog(db, "T", "D", None, "a@x.com")
    blog = append_comment(db, blog.id, "hi")
    before = [dict(c) for c in blog.comments]
    with pytest.raises(CommentIndexOutOfRange):
        append_reply_at(db, blog.id, index, "hey")
    assert get_blog(db, blog.id).comments == before


def test_out_of_range_is_index_error(db):
    blog = create_blog(db, "T", "D", None, "a@x.com")
    with pytest.raises(IndexError):
        append_reply_at(db, blog.id, 0, "hey")


def test_reply_to_unknown_comment_id(db):
    blog = create_blog(db, "T", "D", None, "a@x.com")
    append_comment(db, blog.id, "hi")
    with pytest.raises(CommentNotFound):
        append_reply(db, blog.id, "no-such-comment", "hey")


def test_stale_write_is_detected(db):
    blog = create_blog(db, "T", "D", None, "a@x.com")
    other = SessionLocal()
    try:
        # The second session keeps its version 1 copy alive while the first one writes.
        stale = get_blog(other, blog.id)
        append_comment(db, blog.id, "first")
        with pytest.raises(ConcurrentModification):
            append_comment(other, blog.id, "second")
        assert [c["text"] for c in stale.comments] == ["first"]
    finally:
        other.close()
    assert [c["text"] for c in get_blog(db, blog.id).comments] == ["first"]
