"""End-to-end: posts, editor uploads and orphan collection together."""

from filedb.factory import build_services
from filedb.schemas.post import Post


class TestPostLifecycle:
    def test_edit_then_collect(self, settings, editor_content):
        services = build_services(settings)
        images = services.editor_images

        kept = images.save_uploaded_image(b"1", "kept.png")
        dropped = images.save_uploaded_image(b"2", "dropped.png")
        never_used = images.save_uploaded_image(b"3", "never.gif")

        post = services.posts.create(
            Post(
                title="Trip",
                writer="kim",
                content=editor_content(images.image_url(kept), images.image_url(dropped)),
            )
        )

        # Editing the post removes one image from its content
        services.posts.update(
            post.id,
            Post(title="Trip", writer="kim", content=editor_content(images.image_url(kept))),
        )

        result = services.image_collector.collect()
        assert result.referenced_image_count == 1
        assert result.total_image_file_count == 3
        assert sorted(result.deleted_file_names) == sorted([dropped, never_used])
        assert (settings.editor_image_dir / kept).exists()

        # Deleting the post orphans the remaining image
        services.posts.delete(post.id)
        result = services.image_collector.collect()
        assert result.deleted_file_names == [kept]

        again = services.image_collector.collect()
        assert again.total_image_file_count == 0
        assert again.deleted_file_names == []

    def test_restart_keeps_sequence(self, settings):
        first = build_services(settings)
        a = first.posts.create(Post(title="a"))
        first.posts.delete(a.id)

        second = build_services(settings)
        b = second.posts.create(Post(title="b"))
        assert b.id == a.id + 1
