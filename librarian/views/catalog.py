from http import HTTPStatus

from librarian.forms import AuthorForm, BookForm
from librarian.models import Author, Book
from librarian.payloads import author_payload, book_payload
from librarian.services import catalog
from librarian.services.errors import NotFound
from librarian.views.common import (
    api_view,
    form_error_response,
    json_response,
    no_content,
    parse_json,
)


def _book_data(form: BookForm) -> catalog.BookData:
    return catalog.BookData(**form.cleaned_data)


def _get_book(pk: int) -> Book:
    book = Book.objects.prefetch_related("written_by").filter(pk=pk).first()
    if book is None:
        raise NotFound("Книга не найдена", book_id=pk)
    return book


@api_view(["GET", "POST"])
def author_list(request):
    if request.method == "GET":
        authors = Author.objects.order_by("name", "pk")
        return json_response([author_payload(a) for a in authors])

    form = AuthorForm(parse_json(request))
    if not form.is_valid():
        return form_error_response(form)
    author = catalog.create_author(form.cleaned_data["name"])
    return json_response(author_payload(author), status=HTTPStatus.CREATED)


@api_view(["GET", "PUT", "DELETE"])
def author_detail(request, pk):
    if request.method == "GET":
        author = Author.objects.filter(pk=pk).first()
        if author is None:
            raise NotFound("Автор не найден", author_id=pk)
        return json_response(author_payload(author))

    if request.method == "DELETE":
        catalog.delete_author(pk)
        return no_content()

    form = AuthorForm(parse_json(request))
    if not form.is_valid():
        return form_error_response(form)
    author = catalog.update_author(pk, form.cleaned_data["name"])
    return json_response(author_payload(author))


@api_view(["GET", "POST"])
def book_list(request):
    if request.method == "GET":
        books = Book.objects.prefetch_related("written_by").order_by("title", "pk")
        return json_response([book_payload(b) for b in books])

    form = BookForm(parse_json(request))
    if not form.is_valid():
        return form_error_response(form)
    book = catalog.create_book(_book_data(form))
    return json_response(
        book_payload(_get_book(book.pk)), status=HTTPStatus.CREATED
    )


@api_view(["GET", "PUT", "DELETE"])
def book_detail(request, pk):
    if request.method == "GET":
        return json_response(book_payload(_get_book(pk)))

    if request.method == "DELETE":
        catalog.delete_book(pk)
        return no_content()

    form = BookForm(parse_json(request))
    if not form.is_valid():
        return form_error_response(form)
    catalog.update_book(pk, _book_data(form))
    return json_response(book_payload(_get_book(pk)))
