from django.urls import path

from librarian import views

app_name = "librarian"

urlpatterns = [
    path("authors/", views.author_list, name="author-list"),
    path("authors/<int:pk>/", views.author_detail, name="author-detail"),
    path("books/", views.book_list, name="book-list"),
    path("books/<int:pk>/", views.book_detail, name="book-detail"),
    path("halls/", views.hall_list, name="hall-list"),
    path("halls/<int:pk>/", views.hall_detail, name="hall-detail"),
    path("roles/", views.role_list, name="role-list"),
    path("roles/<int:pk>/", views.role_detail, name="role-detail"),
    path("statuses/", views.status_list, name="status-list"),
    path("statuses/<int:pk>/", views.status_detail, name="status-detail"),
    path("accounts/", views.account_list, name="account-list"),
    path("accounts/<int:pk>/", views.account_detail, name="account-detail"),
    path("loans/", views.loan_list, name="loan-list"),
    path("loans/recent/", views.loan_recent, name="loan-recent"),
    path(
        "loans/account/<int:account_id>/",
        views.loans_for_account,
        name="loan-account",
    ),
    path("loans/book/<int:book_id>/", views.loans_for_book, name="loan-book"),
    path(
        "loans/<int:book_id>/<int:account_id>/",
        views.loan_detail,
        name="loan-detail",
    ),
    path(
        "loans/<int:book_id>/<int:account_id>/return/",
        views.loan_return,
        name="loan-return",
    ),
    path("dashboard/stats/", views.dashboard_stats, name="dashboard-stats"),
]
