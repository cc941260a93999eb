# Services package.
#
# Each module exposes a focused set of async functions that encapsulate
# business logic and database access for a single domain aggregate:
#
#   article_service   CRUD + keyword/offset pagination for Article
#   comment_service   comments with cursor pagination
#   like_service      like / unlike an article
#   product_service   CRUD + keyword/offset pagination for Product
#   favorite_service  favorite / unfavorite a product
#   user_service      registration, credentials and profile of User
#   image_service     image uploads served from the public directory
#
# All service functions that touch the database accept an AsyncSession as
# their first argument so that the router layer controls the transaction
# boundary via the ``get_db`` dependency.
