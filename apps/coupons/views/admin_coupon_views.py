"""
Admin coupon management views.
"""
from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.views import APIView

from apps.common.utils import success_response, error_response
from ..serializers import CouponSerializer, CouponUsageSerializer, CouponWriteSerializer
from ..services import CouponService


class CouponListCreateView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        try:
            page = int(request.GET.get('page', 1))
            limit = min(int(request.GET.get('limit', 20)), 100)
        except ValueError:
            return error_response("page and limit must be integers")

        active_only = request.GET.get('active') in ('1', 'true', 'True')
        coupons, pagination = CouponService.list_coupons(active_only, page, limit)
        return success_response({
            'coupons': CouponSerializer(coupons, many=True).data,
            'pagination': pagination,
        })

    def post(self, request):
        serializer = CouponWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("Invalid coupon data", serializer.errors)

        coupon = CouponService.create_coupon(serializer.validated_data, created_by=request.user)
        return success_response(
            CouponSerializer(coupon).data,
            "Coupon created successfully",
            status_code=status.HTTP_201_CREATED,
        )


class CouponDetailView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request, coupon_id):
        coupon, usages = CouponService.get_coupon_detail(coupon_id)
        data = CouponSerializer(coupon).data
        data['usages'] = CouponUsageSerializer(usages, many=True).data
        return success_response(data)

    def put(self, request, coupon_id):
        serializer = CouponWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return error_response("Invalid coupon data", serializer.errors)

        data = dict(serializer.validated_data)
        if 'used_count' in request.data:
            data['used_count'] = request.data['used_count']
        coupon = CouponService.update_coupon(coupon_id, data)
        return success_response(CouponSerializer(coupon).data, "Coupon updated successfully")

    def delete(self, request, coupon_id):
        CouponService.delete_coupon(coupon_id)
        return success_response(None, "Coupon deleted successfully")
