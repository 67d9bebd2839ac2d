import logging

import pytest

from hasorder.table import Table, belongs_to, has_many, has_one


@pytest.fixture(autouse=True)
def debug_logging(caplog):
    """Capture hasorder debug logs for every test."""
    caplog.set_level(logging.DEBUG, logger="hasorder")
    yield caplog


@pytest.fixture
def schema():
    """A small blog schema: posts belong to users, users have one profile and many posts."""
    class User(Table, table_name="users"):
        profile = has_one("Profile", foreign_key="user_id")
        posts = has_many("Post", foreign_key="creator_id")

    class Profile(Table, table_name="profiles"):
        user = belongs_to(User)

    class Post(Table, table_name="posts"):
        creator = belongs_to(User)
        editor = belongs_to(User, foreign_key="edited_by_id")
        parent = belongs_to("Post")
        comments = has_many("Comment", foreign_key="post_id")

    class Comment(Table, table_name="comments"):
        post = belongs_to(Post)

    return {"User": User, "Profile": Profile, "Post": Post, "Comment": Comment}


@pytest.fixture
def dates_schema():
    """Experiences with two associations to the same dates table."""
    class Date(Table, table_name="dates"):
        pass

    class Experience(Table, table_name="experiences"):
        start_date = belongs_to(Date)
        end_date = belongs_to(Date)

    return {"Date": Date, "Experience": Experience}
