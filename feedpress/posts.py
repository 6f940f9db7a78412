"""Turning markdown documents with YAML frontmatter into stored posts."""

from __future__ import annotations

import logging
import os
import re
import time
from dataclasses import dataclass, field
from typing import Any

import yaml

from .store import CollectionNotFound, Record, RecordNotFound, RecordStore

log = logging.getLogger(__name__)

_STORE_ERRORS = (RecordNotFound, CollectionNotFound)
_HEADING = re.compile(r"^(#{1,6})[\t\n\f\r ]+(.+)$")
_NON_SLUG = re.compile(r"[^a-z0-9]+")
_STRING_FIELDS = ("title", "subtitle", "featured_image", "summary")
_BOOL_FIELDS = ("is_visible", "crosspost_instagram", "crosspost_threads")
_LIST_FIELDS = ("tags", "contexts", "collections")


class FrontmatterError(ValueError):
    """Raised when a document's frontmatter is missing or malformed."""


@dataclass
class PostFrontmatter:
    title: str = ""
    subtitle: str = ""
    tags: list[str] = field(default_factory=list)
    contexts: list[str] = field(default_factory=list)
    collections: list[str] = field(default_factory=list)
    is_visible: bool = False
    featured_image: str = ""
    crosspost_instagram: bool = False
    crosspost_threads: bool = False
    summary: str = ""


@dataclass
class Chapter:
    title: str
    level: int
    content: str = ""
    order: int = 0
    parent_id: str = ""


def _as_string(key: str, value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        raise FrontmatterError(f"{key!r} must be a scalar")
    return str(value)


def _frontmatter_from(data: Any) -> PostFrontmatter:
    if data is None:
        return PostFrontmatter()
    if not isinstance(data, dict):
        raise FrontmatterError("frontmatter must be a mapping")
    values: dict[str, Any] = {}
    for key in _STRING_FIELDS:
        values[key] = _as_string(key, data.get(key))
    for key in _BOOL_FIELDS:
        value = data.get(key)
        if value is not None and not isinstance(value, bool):
            raise FrontmatterError(f"{key!r} must be a boolean")
        values[key] = bool(value)
    for key in _LIST_FIELDS:
        value = data.get(key)
        if value is None:
            values[key] = []
        elif isinstance(value, list):
            values[key] = [_as_string(key, item) for item in value]
        else:
            raise FrontmatterError(f"{key!r} must be a list")
    return PostFrontmatter(**values)


def parse_frontmatter(content: str) -> tuple[PostFrontmatter, str]:
    """Split a document into its frontmatter and markdown body."""
    lines = content.split("\n")
    if len(lines) < 3 or lines[0] != "---":
        raise FrontmatterError("invalid frontmatter format")
    try:
        end = lines.index("---", 1)
    except ValueError:
        raise FrontmatterError("frontmatter not properly closed") from None
    header = "\n".join(lines[1:end])
    log.debug(header)
    try:
        data = yaml.safe_load(header)
    except yaml.YAMLError as exc:
        raise FrontmatterError(str(exc)) from exc
    return _frontmatter_from(data), "\n".join(lines[end + 1:])


def slug_base(title: str) -> str:
    """Lower-case ``title`` and join its alphanumeric runs with dashes."""
    return _NON_SLUG.sub("-", title.lower()).strip("-")


def parse_chapters(content: str) -> list[Chapter]:
    """Collect markdown headings, linking each to the slug of its parent heading."""
    chapters: list[Chapter] = []
    parents: list[str] = []
    for line in content.split("\n"):
        match = _HEADING.match(line)
        if not match:
            continue
        level = len(match.group(1))
        title = match.group(2).strip()
        if not title:
            continue
        if level - 1 > len(parents):
            parents.extend([""] * (level - 1 - len(parents)))
        else:
            del parents[level - 1:]
        parent_id = parents[-1] if level > 1 and parents else ""
        chapters.append(Chapter(title=title, level=level, order=len(chapters),
                                parent_id=parent_id))
        parents.append(slug_base(title))
    return chapters


def _normalise_body(content: str) -> str:
    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return "\n".join(line[:-1] if line.endswith("\r") else line for line in lines)


class PostProcessor:
    """Stores posts and their tags, contexts, collections, chapters and crossposts."""

    def __init__(self, store: RecordStore, app_url: str | None = None) -> None:
        self.store = store
        self.app_url = os.environ.get("APP_URL", "") if app_url is None else app_url

    def _permalink(self, slug: str) -> str:
        return f"{self.app_url.rstrip('/')}/{slug}"

    def process_post(self, content: str, post_id: str | None = None) -> dict[str, Any]:
        """Create a post, or update ``post_id``, from a markdown document."""
        is_update = post_id is not None
        content = _normalise_body(content)
        log.debug(content)
        frontmatter, markdown = parse_frontmatter(content)

        if is_update:
            post = self.store.get("posts", post_id)
        else:
            post = self.store.new_record("posts")

        if not is_update or not post.get("slug"):
            slug = self.unique_slug(frontmatter.title, "posts")
            post["slug"] = slug
        else:
            slug = post["slug"]

        if self.app_url:
            post["permalink"] = self._permalink(slug)

        post["title"] = frontmatter.title
        post["subtitle"] = frontmatter.subtitle
        post["content"] = markdown
        post["type"] = "Blog"
        post["is_visible"] = frontmatter.is_visible
        post["summary"] = frontmatter.summary

        image = frontmatter.featured_image
        if len(image) == 15 and "/" not in image:
            post["featured_image"] = image

        self.store.save(post)

        steps = (
            ("tags", lambda: self.process_tags(post, frontmatter.tags)),
            ("contexts", lambda: self.process_contexts(post, frontmatter.contexts)),
            ("collections", lambda: self.process_collections(post, frontmatter.collections)),
            ("chapters", lambda: self.process_chapters(post, markdown)),
            ("crosspost queue", lambda: self.process_crosspost_queue(
                post, frontmatter, "Update" if is_update else "Create")),
        )
        for label, step in steps:
            try:
                step()
            except _STORE_ERRORS as exc:
                log.error("Error processing %s: %s", label, exc)

        return {"post": post, "message": "Post processed successfully"}

    def process_tags(self, post: Record, tag_names: list[str]) -> None:
        """Link the post to tags by title, creating tags that do not exist."""
        if not tag_names:
            return
        tag_ids = []
        for raw in tag_names:
            name = raw.strip()
            if not name:
                continue
            try:
                tag = self.store.find_first("tags", title=name)
            except RecordNotFound:
                try:
                    tag = self.store.new_record("tags")
                    tag["title"] = name
                    tag["search_count"] = 0
                    self.store.save(tag)
                except _STORE_ERRORS as exc:
                    log.warning("Failed to create tag %s: %s", name, exc)
                    continue
            tag_ids.append(tag.id)
        if tag_ids:
            post["tags"] = tag_ids
            try:
                self.store.save(post)
            except _STORE_ERRORS as exc:
                log.warning("Failed to update post tags: %s", exc)

    def _clear_links(self, collection: str, post: Record) -> None:
        if not post.id:
            return
        try:
            existing = self.store.find_all(collection, post=post.id)
        except CollectionNotFound:
            return
        for record in existing:
            try:
                self.store.delete(record)
            except RecordNotFound:
                pass

    def process_contexts(self, post: Record, context_names: list[str]) -> None:
        """Replace the post's links to existing contexts named by title."""
        if not context_names:
            return
        self._clear_links("context_posts", post)
        for raw in context_names:
            name = raw.strip()
            if not name:
                continue
            try:
                context = self.store.find_first("contexts", title=name)
            except _STORE_ERRORS:
                log.warning("Context not found: %s", name)
                continue
            try:
                link = self.store.new_record("context_posts")
                link["context"] = context.id
                link["post"] = post.id
                self.store.save(link)
            except _STORE_ERRORS as exc:
                log.warning("Failed to create context_post for %s: %s", name, exc)

    def process_collections(self, post: Record, collection_names: list[str]) -> None:
        """Replace the post's collection links, creating collections as needed."""
        if not collection_names:
            return
        self._clear_links("collection_posts", post)
        for order, raw in enumerate(collection_names):
            name = raw.strip()
            if not name:
                continue
            try:
                collection = self.store.find_first("collections", title=name)
            except RecordNotFound:
                log.info("Collection '%s' not found, creating it", name)
                try:
                    collection = self.store.new_record("collections")
                    collection["title"] = name
                    collection["slug"] = self.unique_slug(name, "collections")
                    collection["description"] = ""
                    self.store.save(collection)
                except _STORE_ERRORS as exc:
                    log.warning("Failed to create collection %s: %s", name, exc)
                    continue
            except CollectionNotFound as exc:
                log.warning("Collections collection not found: %s", exc)
                continue
            try:
                link = self.store.new_record("collection_posts")
                link["collection"] = collection.id
                link["post"] = post.id
                link["order"] = order
                self.store.save(link)
            except _STORE_ERRORS as exc:
                log.warning("Failed to create collection_post for %s: %s", name, exc)

    def process_chapters(self, post: Record, markdown_content: str) -> None:
        """Rebuild the post's chapter records from its headings."""
        self._clear_links("post_chapters", post)
        chapters = parse_chapters(markdown_content)
        if not chapters:
            log.info("No chapters found in post content")
            return
        self.store.new_record("post_chapters")
        saved: dict[str, Record] = {}
        for index, chapter in enumerate(chapters):
            record = self.store.new_record("post_chapters")
            chapter_slug = self.unique_slug(chapter.title, "post_chapters")
            record["post"] = post.id
            record["title"] = chapter.title
            record["slug"] = chapter_slug
            record["permalink"] = f"#{chapter_slug}"
            record["order"] = index
            if chapter.level > 1 and chapter.parent_id:
                parent = saved.get(chapter.parent_id)
                if parent is not None:
                    record["parent_chapter"] = parent.id
            try:
                self.store.save(record)
            except _STORE_ERRORS as exc:
                log.error("Failed to create chapter %s: %s", chapter.title, exc)
                continue
            saved[chapter_slug] = record
        log.info("Successfully processed %d chapters", len(saved))

    def process_crosspost_queue(self, post: Record, frontmatter: PostFrontmatter,
                                queue_type: str) -> None:
        """Queue an Instagram crosspost when the frontmatter asks for one."""
        if not frontmatter.crosspost_instagram:
            return
        try:
            accounts = self.store.find_all("instagram_accounts")
        except CollectionNotFound:
            return
        if not accounts:
            return
        try:
            entry = self.store.new_record("crosspost_queue")
        except CollectionNotFound as exc:
            log.warning("Crosspost_queue collection not found: %s", exc)
            return
        entry["platform"] = "Instagram"
        entry["type"] = queue_type
        entry["post"] = post.id
        entry["status"] = "Queued"
        entry["instagram_account"] = accounts[0].id
        try:
            self.store.save(entry)
        except _STORE_ERRORS as exc:
            log.warning("Failed to create Instagram crosspost queue: %s", exc)

    def unique_slug(self, title: str, collection: str) -> str:
        """Return a slug for ``title`` not yet used in ``collection``."""
        base = slug_base(title)
        if not self.slug_exists(base, collection):
            return base
        for counter in range(1, 6):
            candidate = f"{base}-{counter}"
            if not self.slug_exists(candidate, collection):
                return candidate
        return f"{base}-{time.time_ns()}"

    def slug_exists(self, slug: str, collection: str) -> bool:
        """Tell whether ``slug`` (or, for posts, its permalink) is taken."""
        lookups = [{"slug": slug}]
        if collection == "posts" and self.app_url:
            lookups.append({"permalink": self._permalink(slug)})
        for filters in lookups:
            try:
                self.store.find_first(collection, **filters)
            except _STORE_ERRORS:
                continue
            return True
        return False