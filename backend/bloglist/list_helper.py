"""Statistics over a collection of blogs.

Every function here is pure: it takes a sequence of blog-like objects
(anything exposing `title`, `author` and `likes`), never mutates it and
never performs I/O. An empty sequence is a normal input and yields `0`
or `None`, never an exception.

Ties are resolved by input order: `favorite_blog` keeps the first blog
with the highest like count, and the author functions keep the author
whose first blog appears earliest.
"""

from collections import Counter
from functools import reduce
from typing import Iterable, Optional, Sequence, Tuple


def total_likes(blogs: Iterable) -> int:
    """Sum of `likes` over all blogs."""
    return reduce(lambda acc, blog: acc + blog.likes, blogs, 0)


def favorite_blog(blogs: Sequence) -> Optional[dict]:
    """Return `{title, author, likes}` of the most liked blog, or `None`."""
    if not blogs:
        return None
    best = reduce(lambda prev, cur: cur if cur.likes > prev.likes else prev, blogs)
    return {'title': best.title, 'author': best.author, 'likes': best.likes}


def _tally(blogs: Iterable, weight) -> Tuple[Tuple[str, int], ...]:
    """Fold blogs into `(author, total)` pairs in first-occurrence order.

    `weight(blog)` is the amount each blog adds to its author's total.
    Blogs without an author are skipped.
    """
    def step(acc: Counter, blog) -> Counter:
        if blog.author:
            acc[blog.author] += weight(blog)
        return acc

    # the Counter is local to this call; insertion order is first occurrence
    return tuple(reduce(step, blogs, Counter()).items())


def _top(pairs: Tuple[Tuple[str, int], ...]) -> Optional[Tuple[str, int]]:
    if not pairs:
        return None
    # strict comparison keeps the earliest author on ties
    return reduce(lambda prev, cur: cur if cur[1] > prev[1] else prev, pairs)


def most_blogs(blogs: Iterable) -> Optional[dict]:
    """Return `{author, blogs}` for the author with the most blogs."""
    top = _top(_tally(blogs, lambda _blog: 1))
    if top is None:
        return None
    author, count = top
    return {'author': author, 'blogs': count}


def most_likes(blogs: Iterable) -> Optional[dict]:
    """Return `{author, likes}` for the author with the most total likes."""
    top = _top(_tally(blogs, lambda blog: blog.likes))
    if top is None:
        return None
    author, likes = top
    return {'author': author, 'likes': likes}


def summarize(blogs: Sequence) -> dict:
    """Bundle all statistics for one snapshot of the blog collection."""
    return {
        'total_likes': total_likes(blogs),
        'favorite_blog': favorite_blog(blogs),
        'most_blogs': most_blogs(blogs),
        'most_likes': most_likes(blogs),
    }
